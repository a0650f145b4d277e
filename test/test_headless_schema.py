"""
End-to-end tests for the published headless schema

Content models are stored in an in-memory database, composed with the
built-in field types and executed with graphql-core.
"""

import asyncio

import pytest
from graphql import print_schema

from headless_cms.exceptions import SchemaCompositionError
from headless_cms.graphql.composer import SchemaUnit
from headless_cms.graphql.schema import build_headless_schema, execute_operation, generate_headless_schema
from headless_cms.graphql.sdl import FieldDef, ObjectTypeDef
from headless_cms.graphql.value_broker import CANCELLED, ValueUnavailable, resolved_value_key
from headless_cms.plugins import ModelFieldPlugin, ModelFieldVariant, RenderMode
from headless_cms.plugins.loader import initialize_plugins
from headless_cms.services import content_entry_service, content_model_service


def waiting_plugin(field_id, source_field):
    """Read field of ``product`` computed from a sibling field's resolved value."""

    def create_resolver(models, model):
        async def resolve(entry, info):
            key = resolved_value_key(model.model_id, entry["id"], source_field)
            value = await info.context.resolved_values.wait_for(key)
            if isinstance(value, ValueUnavailable):
                return None
            return value.upper()

        return resolve

    return ModelFieldPlugin(
        model_id="product",
        field_id=field_id,
        read=ModelFieldVariant(
            create_type_field=lambda model: FieldDef(field_id, "String"),
            create_resolver=create_resolver,
        ),
    )


def slow_plugin():
    def create_resolver(models, model):
        async def resolve(entry, info):
            await asyncio.sleep(5)
            return "late"

        return resolve

    return ModelFieldPlugin(
        model_id="product",
        field_id="slow",
        read=ModelFieldVariant(
            create_type_field=lambda model: FieldDef("slow", "String"),
            create_resolver=create_resolver,
        ),
    )


@pytest.fixture
async def schema(test_db):
    await content_model_service.save_content_model(
        test_db,
        "product",
        [
            {"fieldId": "title", "type": "text"},
            {"fieldId": "price", "type": "number"},
            {"fieldId": "category", "type": "ref", "settings": {"modelId": "category"}},
        ],
        description="Products for sale",
    )
    await content_model_service.save_content_model(test_db, "category", [{"fieldId": "name", "type": "text"}])

    field_types, model_fields = initialize_plugins(
        model_field_plugins=[
            waiting_plugin("loudTitle", "title"),
            waiting_plugin("neverSet", "missing"),
            slow_plugin(),
        ],
        config={},
    )
    return await generate_headless_schema(test_db, field_types, model_fields)


async def seed(db, user=None):
    user_id = user.id if user else None
    category = await content_entry_service.create_entry(db, "category", {"name": "Lighting"}, user_id)
    lamp = await content_entry_service.create_entry(
        db, "product", {"title": "Lamp", "price": 20, "category": category.id}, user_id
    )
    desk = await content_entry_service.create_entry(db, "product", {"title": "Desk", "price": 120}, user_id)
    return category, lamp, desk


class TestPublishedSchema:
    @pytest.mark.asyncio
    async def test_root_entry_points(self, schema):
        query_fields = schema.query_type.fields
        assert {"cmsVersion", "headlessManage", "headlessRead"} <= set(query_fields)
        assert "headlessManage" in schema.mutation_type.fields

        manage_query = schema.get_type("HeadlessManageQuery").fields
        assert {"getProduct", "listProducts", "getCategory", "listCategories"} <= set(manage_query)
        mutation = schema.get_type("HeadlessManageMutation").fields
        assert {"createProduct", "updateProduct", "deleteProduct"} <= set(mutation)

    @pytest.mark.asyncio
    async def test_read_type_carries_model_field_plugins(self, schema):
        read_fields = schema.get_type("ReadProduct").fields
        assert {"id", "title", "price", "category", "loudTitle"} <= set(read_fields)
        assert "loudTitle" not in schema.get_type("ManageProduct").fields
        assert str(read_fields["category"].type) == "ReadCategory"

    @pytest.mark.asyncio
    async def test_printed_schema(self, schema):
        sdl = print_schema(schema)
        assert "type ManageProduct" in sdl
        assert "enum ReadProductSorter" in sdl
        assert '"""Products for sale"""' in sdl or '"Products for sale"' in sdl

    def test_empty_model_set_is_valid(self):
        schema = build_headless_schema([])
        assert "_empty" in schema.get_type("HeadlessReadQuery").fields

    @pytest.mark.asyncio
    async def test_placeholder_only_on_empty_root_types(self, schema):
        for type_name in ("HeadlessManageQuery", "HeadlessManageMutation", "HeadlessReadQuery"):
            assert "_empty" not in schema.get_type(type_name).fields
        assert "_empty" not in print_schema(schema)

    def test_invalid_unit_is_not_published(self):
        broken = SchemaUnit(
            name="graphql-schema-broken-read",
            model_id="broken",
            mode=RenderMode.READ,
            definitions=(ObjectTypeDef("ReadBroken", (FieldDef("part", "MissingType"),)),),
            resolvers={},
        )
        with pytest.raises(SchemaCompositionError):
            build_headless_schema([broken])


class TestCrossFieldResolution:
    @pytest.mark.asyncio
    async def test_field_waits_for_sibling_value(self, schema, test_db, make_context):
        _, lamp, _ = await seed(test_db)
        context = make_context(test_db)

        # loudTitle is requested before title; it must wait for the published value
        result = await execute_operation(
            schema,
            "query ($id: ID) { headlessRead { getProduct(where: {id: $id}) { data { loudTitle title } error { code } } } }",
            context,
            variables={"id": str(lamp.id)},
        )

        assert result.errors is None
        product = result.data["headlessRead"]["getProduct"]
        assert product["error"] is None
        assert product["data"] == {"loudTitle": "LAMP", "title": "Lamp"}

    @pytest.mark.asyncio
    async def test_values_are_per_entry(self, schema, test_db, make_context):
        await seed(test_db)
        result = await execute_operation(
            schema,
            "{ headlessRead { listProducts(sort: [price_ASC]) { data { title loudTitle } } } }",
            make_context(test_db),
        )
        assert result.errors is None
        assert result.data["headlessRead"]["listProducts"]["data"] == [
            {"title": "Lamp", "loudTitle": "LAMP"},
            {"title": "Desk", "loudTitle": "DESK"},
        ]

    @pytest.mark.asyncio
    async def test_unpublished_value_times_out(self, schema, test_db, make_context):
        await seed(test_db)
        result = await execute_operation(
            schema,
            "{ headlessRead { listProducts { data { title neverSet } } } }",
            make_context(test_db, resolved_value_timeout=0.05),
        )
        assert result.errors is None
        assert all(item["neverSet"] is None for item in result.data["headlessRead"]["listProducts"]["data"])

    @pytest.mark.asyncio
    async def test_broker_discarded_after_operation(self, schema, test_db, make_context):
        await seed(test_db)
        context = make_context(test_db)
        await execute_operation(schema, "{ headlessRead { listProducts { data { title } } } }", context)
        assert context.resolved_values.closed

    @pytest.mark.asyncio
    async def test_operation_timeout_cancels_waiters(self, schema, test_db, make_context):
        await seed(test_db)
        context = make_context(test_db)
        result = await execute_operation(
            schema,
            "{ headlessRead { listProducts { data { slow } } } }",
            context,
            timeout=0.05,
        )
        assert result.data is None
        assert result.errors[0].message == "Operation timed out"
        assert context.resolved_values.get("product:1:title") is CANCELLED


class TestReadQueries:
    @pytest.mark.asyncio
    async def test_reference_resolves_to_entry(self, schema, test_db, make_context):
        _, lamp, _ = await seed(test_db)
        result = await execute_operation(
            schema,
            "query ($id: ID) { headlessRead { getProduct(where: {id: $id}) { data { category { name } } } } }",
            make_context(test_db),
            variables={"id": str(lamp.id)},
        )
        assert result.errors is None
        assert result.data["headlessRead"]["getProduct"]["data"]["category"] == {"name": "Lighting"}

    @pytest.mark.asyncio
    async def test_list_with_filter_and_meta(self, schema, test_db, make_context):
        await seed(test_db)
        result = await execute_operation(
            schema,
            """{ headlessRead { listProducts(where: {price_gt: 50}, perPage: 1) {
                    data { title }
                    meta { totalCount totalPages page perPage nextPage previousPage }
            } } }""",
            make_context(test_db),
        )
        assert result.errors is None
        listing = result.data["headlessRead"]["listProducts"]
        assert listing["data"] == [{"title": "Desk"}]
        assert listing["meta"] == {
            "totalCount": 1,
            "totalPages": 1,
            "page": 1,
            "perPage": 1,
            "nextPage": None,
            "previousPage": None,
        }

    @pytest.mark.asyncio
    async def test_get_without_match_returns_error(self, schema, test_db, make_context):
        result = await execute_operation(
            schema,
            '{ headlessRead { getProduct(where: {title: "Sofa"}) { data { title } error { code } } } }',
            make_context(test_db),
        )
        assert result.errors is None
        assert result.data["headlessRead"]["getProduct"] == {"data": None, "error": {"code": "NOT_FOUND"}}


class TestManageOperations:
    @pytest.mark.asyncio
    async def test_create_get_update_delete(self, schema, test_db, test_user, make_context):
        create = await execute_operation(
            schema,
            """mutation ($data: ManageProductInput!) {
                headlessManage { createProduct(data: $data) { data { id title price createdBy { email } } error { code } } }
            }""",
            make_context(test_db, user=test_user),
            variables={"data": {"title": "Lamp", "price": 20}},
        )
        assert create.errors is None
        created = create.data["headlessManage"]["createProduct"]["data"]
        assert created["title"] == "Lamp"
        assert created["createdBy"] == {"email": "editor@example.com"}

        update = await execute_operation(
            schema,
            """mutation ($id: ID!) {
                headlessManage { updateProduct(id: $id, data: {price: 25}) { data { title price } } }
            }""",
            make_context(test_db, user=test_user),
            variables={"id": created["id"]},
        )
        assert update.errors is None
        assert update.data["headlessManage"]["updateProduct"]["data"] == {"title": "Lamp", "price": 25.0}

        fetched = await execute_operation(
            schema,
            "query ($id: ID) { headlessManage { getProduct(id: $id) { data { price updatedBy { email } } } } }",
            make_context(test_db),
            variables={"id": created["id"]},
        )
        assert fetched.data["headlessManage"]["getProduct"]["data"] == {
            "price": 25.0,
            "updatedBy": {"email": "editor@example.com"},
        }

        delete = await execute_operation(
            schema,
            "mutation ($id: ID!) { headlessManage { deleteProduct(id: $id) { data error { code } } } }",
            make_context(test_db),
            variables={"id": created["id"]},
        )
        assert delete.data["headlessManage"]["deleteProduct"] == {"data": True, "error": None}

    @pytest.mark.asyncio
    async def test_list_with_json_sort(self, schema, test_db, make_context):
        await seed(test_db)
        result = await execute_operation(
            schema,
            "query ($sort: JSON) { headlessManage { listProducts(sort: $sort) { data { title } } } }",
            make_context(test_db),
            variables={"sort": {"price": -1}},
        )
        assert result.errors is None
        assert [item["title"] for item in result.data["headlessManage"]["listProducts"]["data"]] == ["Desk", "Lamp"]

    @pytest.mark.asyncio
    async def test_invalid_sort_reported_in_response(self, schema, test_db, make_context):
        result = await execute_operation(
            schema,
            'query { headlessManage { listProducts(sort: ["title"]) { data { title } meta { page } error { code } } } }',
            make_context(test_db),
        )
        assert result.errors is None
        listing = result.data["headlessManage"]["listProducts"]
        assert listing["data"] is None
        assert listing["error"] == {"code": "VALIDATION_FAILED"}

    @pytest.mark.asyncio
    async def test_invalid_json_sort_direction_reported_in_response(self, schema, test_db, make_context):
        result = await execute_operation(
            schema,
            "query ($sort: JSON) { headlessManage { listProducts(sort: $sort) { data { title } error { code } } } }",
            make_context(test_db),
            variables={"sort": {"title": "asc"}},
        )
        assert result.errors is None
        assert result.data["headlessManage"]["listProducts"] == {"data": None, "error": {"code": "VALIDATION_FAILED"}}

    @pytest.mark.asyncio
    async def test_delete_missing_entry(self, schema, test_db, make_context):
        result = await execute_operation(
            schema,
            'mutation { headlessManage { deleteProduct(id: "999") { data error { code message } } } }',
            make_context(test_db),
        )
        response = result.data["headlessManage"]["deleteProduct"]
        assert response["data"] is None
        assert response["error"]["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_manage_fields_do_not_publish_values(self, schema, test_db, make_context):
        await seed(test_db)
        context = make_context(test_db)
        await execute_operation(schema, "{ headlessManage { listProducts { data { title } } } }", context)
        assert context.resolved_values is None
        assert context.headless_manage
