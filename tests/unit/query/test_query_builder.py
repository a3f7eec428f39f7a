"""Tests for QueryBuilder request shaping.

Covers the choice between the simple GET endpoint and the structured POST
endpoint, and the exact parameters/body each one receives.
"""

import pytest

from wowsql import QueryBuilder, WOWSQLClient

from sdk_test_support import DATABASE_URL, request_json


class TestSimpleQueries:
    """Queries that only use simple operators go out as GET."""

    def test_select_filter_limit_scenario(self, httpx_mock, db_client: WOWSQLClient):
        """Test the canonical GET scenario with select, two filters and limit."""
        httpx_mock.add_response(method="GET", json={"data": [], "count": 0})

        db_client.table("users").select("id", "name").eq("status", "active").gt(
            "age", 18
        ).limit(10).get()

        request = httpx_mock.get_request()
        assert request.method == "GET"
        assert request.url.path == "/api/v2/users"
        assert dict(request.url.params) == {
            "select": "id,name",
            "filter": "status.eq.active,age.gt.18",
            "limit": "10",
        }

    def test_filters_keep_call_order(self, httpx_mock, db_client: WOWSQLClient):
        """Test that the filter string lists triples in the order they were added."""
        httpx_mock.add_response(method="GET", json={"data": []})

        (
            db_client.table("orders")
            .query()
            .lte("total", 100)
            .neq("status", "cancelled")
            .gte("total", 10)
            .lt("items", 5)
            .like("note", "%gift%")
            .get()
        )

        params = httpx_mock.get_request().url.params
        assert params["filter"] == (
            "total.lte.100,status.neq.cancelled,total.gte.10,"
            "items.lt.5,note.like.%gift%"
        )
        assert "select" not in params

    def test_is_null_serializes_literal_null(self, httpx_mock, db_client: WOWSQLClient):
        """Test that null checks never produce an empty filter value."""
        httpx_mock.add_response(method="GET", json={"data": []})

        db_client.table("users").query().is_null("deleted_at").is_not_null(
            "email"
        ).get()

        params = httpx_mock.get_request().url.params
        assert params["filter"] == "deleted_at.is.null,email.is_not.null"

    def test_order_and_offset_params(self, httpx_mock, db_client: WOWSQLClient):
        """Test ordering and pagination parameters on the GET endpoint."""
        httpx_mock.add_response(method="GET", json={"data": []})

        db_client.table("posts").select("*").order_by("created_at", desc=True).limit(
            20
        ).offset(40).get()

        params = dict(httpx_mock.get_request().url.params)
        assert params == {
            "select": "*",
            "order": "created_at",
            "order_direction": "desc",
            "limit": "20",
            "offset": "40",
        }

    def test_order_alias_accepts_direction_string(self, db_client: WOWSQLClient):
        """Test the order() alias maps its direction onto order_by()."""
        builder = QueryBuilder(db_client, "posts").order("title", "DESC")
        assert builder.build_query_params()["order_direction"] == "desc"

        builder.order("title")
        assert builder.build_query_params()["order_direction"] == "asc"

    def test_or_filter_stays_on_get_endpoint(self, httpx_mock, db_client: WOWSQLClient):
        """Test that an OR combinator alone does not force the POST endpoint."""
        httpx_mock.add_response(method="GET", json={"data": []})

        builder = db_client.table("users").query().eq("role", "admin").or_(
            "role", "eq", "owner"
        )
        builder.get()

        assert builder.filters[1].logical_op == "OR"
        assert httpx_mock.get_request().url.params["filter"] == (
            "role.eq.admin,role.eq.owner"
        )

    def test_get_twice_sends_identical_requests(
        self, httpx_mock, db_client: WOWSQLClient
    ):
        """Test that terminal calls do not reset the accumulated state."""
        httpx_mock.add_response(method="GET", json={"data": [{"id": 1}]})
        httpx_mock.add_response(method="GET", json={"data": [{"id": 1}]})

        builder = db_client.table("users").select("id").eq("status", "active")
        builder.get()
        builder.execute()

        first, second = httpx_mock.get_requests()
        assert first.url == second.url
        assert first.method == second.method == "GET"


class TestSelect:
    """Test column selection serialization."""

    def test_wildcard_alone(self, db_client: WOWSQLClient):
        builder = QueryBuilder(db_client, "users").select("*")
        assert builder.build_query_params()["select"] == "*"

    def test_wildcard_never_joined_with_columns(self, db_client: WOWSQLClient):
        """Test that the wildcard supersedes named columns."""
        builder = QueryBuilder(db_client, "users").select("*", "id")
        assert builder.build_query_params()["select"] == "*"

    def test_named_columns_are_comma_joined(self, db_client: WOWSQLClient):
        builder = QueryBuilder(db_client, "users").select("a", "b")
        assert builder.build_query_params()["select"] == "a,b"

    def test_comma_separated_argument_is_split(self, db_client: WOWSQLClient):
        """Test that 'id, name' behaves like select('id', 'name') in both modes."""
        builder = QueryBuilder(db_client, "users").select("id, name")
        assert builder.build_query_params()["select"] == "id,name"
        assert builder.build_query_body()["select"] == ["id", "name"]

    def test_empty_select_means_all_columns(self, db_client: WOWSQLClient):
        builder = QueryBuilder(db_client, "users").select()
        assert builder.build_query_params()["select"] == "*"


class TestStructuredQueries:
    """Queries with advanced features go out as POST {table}/query."""

    def test_in_filter_scenario(self, httpx_mock, db_client: WOWSQLClient):
        """Test the canonical POST scenario with an IN filter."""
        httpx_mock.add_response(method="POST", json={"data": []})

        db_client.table("users").select("*").in_("id", [1, 2, 3]).get()

        request = httpx_mock.get_request()
        assert request.method == "POST"
        assert str(request.url) == f"{DATABASE_URL}/users/query"
        assert request_json(request) == {
            "select": ["*"],
            "filters": [
                {"column": "id", "operator": "in", "value": [1, 2, 3], "logical_op": "AND"}
            ],
        }

    @pytest.mark.parametrize(
        "configure",
        [
            lambda b: b.not_in("status", ["banned"]),
            lambda b: b.between("age", 18, 65),
            lambda b: b.not_between("score", 0, 10),
            lambda b: b.group_by("country"),
            lambda b: b.having("COUNT(*)", "gt", 5),
        ],
        ids=["not_in", "between", "not_between", "group_by", "having"],
    )
    def test_advanced_features_require_post(self, db_client: WOWSQLClient, configure):
        """Test each feature that moves a query to the structured endpoint."""
        builder = QueryBuilder(db_client, "users").eq("active", True)
        assert builder.requires_structured_query() is False

        configure(builder)
        assert builder.requires_structured_query() is True

    def test_simple_filter_rides_along_with_between(
        self, httpx_mock, db_client: WOWSQLClient
    ):
        """Test that mixing eq and between sends both as structured filters.

        Only the operator kind decides the endpoint, so the eq filter also
        moves to the POST body.
        """
        httpx_mock.add_response(method="POST", json={"data": []})

        db_client.table("users").query().eq("status", "active").between(
            "age", 18, 30
        ).get()

        body = request_json(httpx_mock.get_request())
        assert body == {
            "filters": [
                {
                    "column": "status",
                    "operator": "eq",
                    "value": "active",
                    "logical_op": "AND",
                },
                {
                    "column": "age",
                    "operator": "between",
                    "value": [18, 30],
                    "logical_op": "AND",
                },
            ]
        }

    def test_structured_get_twice_sends_identical_requests(
        self, httpx_mock, db_client: WOWSQLClient
    ):
        """Test that repeating a POST query re-sends the same body."""
        httpx_mock.add_response(method="POST", json={"data": []})
        httpx_mock.add_response(method="POST", json={"data": []})

        builder = (
            db_client.table("users")
            .select("country")
            .not_in("status", ["banned"])
            .group_by("country")
            .limit(3)
        )
        builder.get()
        builder.get()

        first, second = httpx_mock.get_requests()
        assert first.method == second.method == "POST"
        assert first.url == second.url
        assert request_json(first) == request_json(second) == {
            "select": ["country"],
            "filters": [
                {
                    "column": "status",
                    "operator": "not_in",
                    "value": ["banned"],
                    "logical_op": "AND",
                }
            ],
            "group_by": ["country"],
            "limit": 3,
        }

    def test_full_structured_body(self, httpx_mock, db_client: WOWSQLClient):
        """Test every body field produced by a grouped, ordered, paged query."""
        httpx_mock.add_response(method="POST", json={"data": []})

        (
            db_client.table("orders")
            .select("country", "COUNT(*) as total")
            .or_("status", "in", ["paid", "shipped"])
            .group_by("country")
            .having("COUNT(*)", "gte", 10)
            .order_by("country")
            .limit(5)
            .offset(10)
            .get()
        )

        assert request_json(httpx_mock.get_request()) == {
            "select": ["country", "COUNT(*) as total"],
            "filters": [
                {
                    "column": "status",
                    "operator": "in",
                    "value": ["paid", "shipped"],
                    "logical_op": "OR",
                }
            ],
            "group_by": ["country"],
            "having": [{"column": "COUNT(*)", "operator": "gte", "value": 10}],
            "order_by": "country",
            "order_direction": "asc",
            "limit": 5,
            "offset": 10,
        }


class TestFirst:
    """Test first() convenience method."""

    def test_first_returns_first_record(self, httpx_mock, db_client: WOWSQLClient):
        httpx_mock.add_response(
            method="GET", json={"data": [{"id": 7, "name": "Ada"}], "count": 1}
        )

        record = db_client.table("users").query().eq("name", "Ada").first()

        assert record == {"id": 7, "name": "Ada"}
        assert httpx_mock.get_request().url.params["limit"] == "1"

    def test_first_returns_none_when_empty(self, httpx_mock, db_client: WOWSQLClient):
        httpx_mock.add_response(method="GET", json={"data": [], "count": 0})

        assert db_client.table("users").query().eq("name", "nobody").first() is None


class TestValidation:
    """Test argument validation performed before any request."""

    def test_negative_limit_rejected(self, db_client: WOWSQLClient):
        with pytest.raises(ValueError, match="limit must be non-negative"):
            QueryBuilder(db_client, "users").limit(-1)

    def test_negative_offset_rejected(self, db_client: WOWSQLClient):
        with pytest.raises(ValueError, match="offset must be non-negative"):
            QueryBuilder(db_client, "users").offset(-5)

    def test_unknown_operator_rejected(self, db_client: WOWSQLClient):
        with pytest.raises(ValueError, match="Unsupported filter operator"):
            QueryBuilder(db_client, "users").filter("age", "approx", 3)

    def test_between_needs_pair(self, db_client: WOWSQLClient):
        with pytest.raises(ValueError, match="pair"):
            QueryBuilder(db_client, "users").filter("age", "between", [1, 2, 3])
