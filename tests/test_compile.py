"""Unit tests for StatementRenderer (all statement kinds and dialects)."""

from __future__ import annotations

import pytest

from chainql import Statement, delete, insert, select, update
from chainql.compile.mysql import MYSQL_MAX_ROWS, MySQLCompiler
from chainql.compile.renderer import StatementRenderer
from chainql.compile.sqlite import SQLiteCompiler
from chainql.compile.sqlserver import SQLServerCompiler
from chainql.compile.standard import StandardCompiler
from chainql.errors import CompilationError
from chainql.schema.clauses import JoinType


def _sales_report() -> Statement:
    return (
        Statement()
        .select("albums.Title", "artists.Name", "COUNT(invoice_items.TrackId) AS Sales")
        .from_("albums")
        .add_join(JoinType.INNER, "tracks", "tracks.AlbumId = albums.AlbumId")
        .add_join(JoinType.LEFT, "invoice_items", "invoice_items.TrackId = tracks.TrackId")
        .add_join(JoinType.INNER, "artists", "artists.ArtistId = albums.ArtistId")
        .group_by("albums.Title")
    )


_SALES_SQL = (
    "SELECT albums.Title,artists.Name,COUNT(invoice_items.TrackId) AS Sales "
    "FROM albums "
    "INNER JOIN tracks ON tracks.AlbumId = albums.AlbumId "
    "LEFT JOIN invoice_items ON invoice_items.TrackId = tracks.TrackId "
    "INNER JOIN artists ON artists.ArtistId = albums.ArtistId "
    "GROUP BY albums.Title"
)


# ---------------------------------------------------------------------------
# SELECT
# ---------------------------------------------------------------------------


def test_select_star_from_table():
    assert Statement().select("*").from_("artists").render() == "SELECT * FROM artists"


def test_select_without_from():
    assert str(Statement().select("somefunction()")) == "SELECT somefunction()"


def test_empty_select_list_renders_star():
    assert Statement().from_("artists").render() == "SELECT * FROM artists"


def test_select_columns_with_table_alias():
    sql = Statement().select("column1", "column2", "column3").from_("table1", "t1").render()
    assert sql == "SELECT column1,column2,column3 FROM table1 t1"


def test_select_list_given_as_single_list():
    assert select(["a", "b"]).from_("t").render() == "SELECT a,b FROM t"


def test_select_replaces_previous_list():
    q = Statement().select("column1", "column2", "column3").from_("table1", "t1")
    q.select("column_a", "column_b", "column_c")
    assert str(q) == "SELECT column_a,column_b,column_c FROM table1 t1"


def test_add_select_appends():
    sql = Statement().select("a").add_select("b", "c").from_("t").render()
    assert sql == "SELECT a,b,c FROM t"


def test_distinct():
    assert Statement().select("Name").distinct().from_("artists").render() == (
        "SELECT DISTINCT Name FROM artists"
    )


def test_distinct_can_be_switched_off():
    sql = Statement().select("Name").distinct().distinct(False).from_("artists").render()
    assert sql == "SELECT Name FROM artists"


def test_select_with_where():
    sql = Statement().select("Title").from_("albums").where("ArtistId = ?").render()
    assert sql == "SELECT Title FROM albums WHERE ArtistId = ?"


def test_select_with_order_by():
    sql = Statement().select("Title").from_("albums").order_by("Title", "ASC").render()
    assert sql == "SELECT Title FROM albums ORDER BY Title ASC"


def test_order_by_defaults_to_asc_and_normalises_case():
    sql = (
        Statement()
        .select("*")
        .from_("table1", "t1")
        .order_by("t1.sort", "desc")
        .add_order_by("t1.surname")
        .render()
    )
    assert sql == "SELECT * FROM table1 t1 ORDER BY t1.sort DESC,t1.surname ASC"


def test_order_by_replaces_previous_entries():
    sql = Statement().select("*").from_("t").order_by("a").order_by("b", "DESC").render()
    assert sql == "SELECT * FROM t ORDER BY b DESC"


def test_select_with_left_join():
    sql = (
        Statement()
        .select("albums.Title", "artists.Name")
        .from_("albums")
        .add_join("LEFT JOIN", "artists", "albums.ArtistId = artists.ArtistId")
        .render()
    )
    assert sql == (
        "SELECT albums.Title,artists.Name FROM albums "
        "LEFT JOIN artists ON albums.ArtistId = artists.ArtistId"
    )


def test_select_with_join_where_and_order_by_mapping():
    sql = (
        Statement()
        .select("albums.Title", "artists.Name")
        .from_("albums")
        .left_join("artists", "albums.ArtistId = artists.ArtistId")
        .where("artists.ArtistId = ?")
        .order_by({"artists.Name": "ASC", "albums.Title": "ASC"})
        .render()
    )
    assert sql == (
        "SELECT albums.Title,artists.Name FROM albums "
        "LEFT JOIN artists ON albums.ArtistId = artists.ArtistId "
        "WHERE artists.ArtistId = ? "
        "ORDER BY artists.Name ASC,albums.Title ASC"
    )


def test_joins_with_table_aliases():
    sql = (
        Statement()
        .select("column1", "column2", "column3")
        .from_("table1", "t1")
        .join("table2", "t1.id = t2.id", alias="t2")
        .left_join("table3", "t1.id = t3.id", alias="t3")
        .render()
    )
    assert sql == (
        "SELECT column1,column2,column3 FROM table1 t1 "
        "INNER JOIN table2 t2 ON t1.id = t2.id "
        "LEFT JOIN table3 t3 ON t1.id = t3.id"
    )


def test_every_join_type_keyword():
    sql = (
        Statement()
        .select("*")
        .from_("a")
        .inner_join("b", "a.id = b.id")
        .right_join("c", "a.id = c.id")
        .full_join("d", "a.id = d.id")
        .cross_join("e")
        .add_join("left", "f", "a.id = f.id")
        .render()
    )
    assert sql == (
        "SELECT * FROM a "
        "INNER JOIN b ON a.id = b.id "
        "RIGHT JOIN c ON a.id = c.id "
        "FULL JOIN d ON a.id = d.id "
        "CROSS JOIN e "
        "LEFT JOIN f ON a.id = f.id"
    )


def test_join_without_on():
    assert Statement().select("*").from_("a").join("b").render() == "SELECT * FROM a INNER JOIN b"


def test_group_by_without_having():
    assert _sales_report().render() == _SALES_SQL


def test_group_by_with_having():
    assert _sales_report().having("Sales = 0").render() == f"{_SALES_SQL} HAVING Sales = 0"


def test_having_without_group_by_is_not_rendered():
    sql = Statement().select("COUNT(*) AS n").from_("t").having("n > 1").render()
    assert sql == "SELECT COUNT(*) AS n FROM t"


def test_add_group_by_appends():
    sql = Statement().select("a", "b").from_("t").group_by("a").add_group_by("b").render()
    assert sql == "SELECT a,b FROM t GROUP BY a,b"


def test_having_connectors():
    sql = (
        Statement()
        .select("ArtistId", "COUNT(*) AS n")
        .from_("albums")
        .group_by("ArtistId")
        .having("n > 1")
        .or_having_not("n > 10")
        .and_having("ArtistId <> ?")
        .render()
    )
    assert sql == (
        "SELECT ArtistId,COUNT(*) AS n FROM albums GROUP BY ArtistId "
        "HAVING n > 1 OR NOT n > 10 AND ArtistId <> ?"
    )


def test_having_exists():
    sql = (
        Statement()
        .select("AlbumId")
        .from_("tracks")
        .group_by("AlbumId")
        .having_exists(lambda q: q.select("1").from_("albums").where("albums.AlbumId = tracks.AlbumId"))
        .render()
    )
    assert sql == (
        "SELECT AlbumId FROM tracks GROUP BY AlbumId "
        "HAVING EXISTS (SELECT 1 FROM albums WHERE albums.AlbumId = tracks.AlbumId)"
    )


# ---------------------------------------------------------------------------
# WHERE composition
# ---------------------------------------------------------------------------


def test_bare_conditions_render_without_keyword():
    q = Statement().where("username = ?").or_where("email = ?")
    assert str(q) == "username = ? OR email = ?"


def test_empty_statement_renders_empty_string():
    assert Statement().render() == ""


def test_where_replaces_previous_group():
    sql = Statement().select("*").from_("t").where("a = 1").where("b = 2").render()
    assert sql == "SELECT * FROM t WHERE b = 2"


def test_connectors_render_inline():
    sql = Statement().select("*").from_("t").where("a").and_where("b").or_where("c").render()
    assert sql == "SELECT * FROM t WHERE a AND b OR c"


def test_mixed_connectors_with_raw_group():
    sql = (
        Statement()
        .select("column1", "column2", "column3")
        .from_("table1", "t1")
        .where("t1.id = ?")
        .or_where("(t1.email = ? AND t1.username = ?)")
        .and_where("t1.created_at < ?")
        .render()
    )
    assert sql == (
        "SELECT column1,column2,column3 FROM table1 t1 "
        "WHERE t1.id = ? OR (t1.email = ? AND t1.username = ?) AND t1.created_at < ?"
    )


def test_several_conditions_in_one_call():
    sql = (
        Statement()
        .select("*")
        .from_("t")
        .where("a", "b")
        .or_where("c", "d")
        .render()
    )
    assert sql == "SELECT * FROM t WHERE a AND b OR c OR d"


def test_negated_conditions():
    sql = (
        Statement()
        .select("*")
        .from_("t")
        .where_not("a")
        .and_where_not("b")
        .or_where_not("c")
        .render()
    )
    assert sql == "SELECT * FROM t WHERE NOT a AND NOT b OR NOT c"


def test_adding_to_empty_group_drops_connector():
    assert Statement().select("*").from_("t").or_where("a").render() == "SELECT * FROM t WHERE a"


def test_condition_closure_renders_parenthesised_group():
    sql = (
        Statement()
        .select("*")
        .from_("users")
        .where("active = 1")
        .and_where(lambda q: q.where("username = ?").or_where("email = ?"))
        .render()
    )
    assert sql == "SELECT * FROM users WHERE active = 1 AND (username = ? OR email = ?)"


def test_nested_condition_groups():
    sql = (
        Statement()
        .select("*")
        .from_("t")
        .where(
            lambda q: q.where("a").or_where(lambda inner: inner.where("b").and_where("c"))
        )
        .render()
    )
    assert sql == "SELECT * FROM t WHERE (a OR (b AND c))"


def test_exists_variants():
    def sub(q: Statement) -> None:
        q.select("1").from_("albums").where("albums.ArtistId = artists.ArtistId")

    body = "(SELECT 1 FROM albums WHERE albums.ArtistId = artists.ArtistId)"
    base = Statement().select("Name").from_("artists")

    assert base.where_exists(sub).render() == f"SELECT Name FROM artists WHERE EXISTS {body}"
    assert base.where_not_exists(sub).render() == (
        f"SELECT Name FROM artists WHERE NOT EXISTS {body}"
    )

    sql = (
        Statement()
        .select("Name")
        .from_("artists")
        .where("Name LIKE ?")
        .and_where_exists(sub)
        .or_where_not_exists(sub)
        .and_where_not_exists(sub)
        .or_where_exists(sub)
        .render()
    )
    assert sql == (
        f"SELECT Name FROM artists WHERE Name LIKE ? AND EXISTS {body} "
        f"OR NOT EXISTS {body} AND NOT EXISTS {body} OR EXISTS {body}"
    )


# ---------------------------------------------------------------------------
# Subqueries
# ---------------------------------------------------------------------------


def test_derived_table_without_alias():
    sql = Statement().select("*").from_(lambda q: q.select("*").from_("users")).render()
    assert sql == "SELECT * FROM (SELECT * FROM users)"


def test_derived_table_alias_from_closure_return():
    def recent(q: Statement) -> str:
        q.select("*").from_("users").where("created_at > ?")
        return "recent"

    sql = Statement().select("recent.email").from_(recent).render()
    assert sql == "SELECT recent.email FROM (SELECT * FROM users WHERE created_at > ?) AS recent"


def test_derived_table_alias_argument():
    sql = Statement().select("*").from_(lambda q: q.select("*").from_("users"), "u").render()
    assert sql == "SELECT * FROM (SELECT * FROM users) AS u"


def test_select_list_subquery():
    def track_count(q: Statement) -> str:
        q.select("COUNT(*)").from_("tracks").where("tracks.AlbumId = albums.AlbumId")
        return "Tracks"

    sql = Statement().select("Title", track_count).from_("albums").render()
    assert sql == (
        "SELECT Title,(SELECT COUNT(*) FROM tracks WHERE tracks.AlbumId = albums.AlbumId) "
        "AS Tracks FROM albums"
    )


def test_join_on_derived_table_and_condition_group():
    def totals(q: Statement) -> str:
        q.select("AlbumId", "COUNT(*) AS n").from_("tracks").group_by("AlbumId")
        return "totals"

    sql = (
        Statement()
        .select("albums.Title", "totals.n")
        .from_("albums")
        .left_join(
            totals,
            lambda q: q.where("totals.AlbumId = albums.AlbumId").and_where("totals.n > ?"),
        )
        .render()
    )
    assert sql == (
        "SELECT albums.Title,totals.n FROM albums "
        "LEFT JOIN (SELECT AlbumId,COUNT(*) AS n FROM tracks GROUP BY AlbumId) AS totals "
        "ON totals.AlbumId = albums.AlbumId AND totals.n > ?"
    )


# ---------------------------------------------------------------------------
# UNION / WITH
# ---------------------------------------------------------------------------


def test_union_renders_before_order_by_and_limit():
    sql = (
        Statement()
        .select("Name")
        .from_("artists")
        .union(lambda q: q.select("Name").from_("playlists"))
        .union_all(lambda q: q.select("Name").from_("tracks"))
        .order_by("Name")
        .limit(5)
        .render()
    )
    assert sql == (
        "SELECT Name FROM artists UNION SELECT Name FROM playlists "
        "UNION ALL SELECT Name FROM tracks ORDER BY Name ASC LIMIT 5"
    )


def test_recursive_cte_with_union():
    def tree(q: Statement) -> None:
        (
            q.select("e0.EmployeeId", "e0.ReportsTo", "0 AS Level")
            .from_("employees AS e0")
            .where("e0.ReportsTo IS NULL")
            .union(
                lambda u: u.select("e1.EmployeeId", "e1.ReportsTo", "Level + 1")
                .from_("employees AS e1")
                .join("employee_tree AS et", "et.EmployeeId = e1.ReportsTo")
            )
        )

    q = Statement().with_("employee_tree", tree).select("*").from_("employee_tree")
    assert q.render() == (
        "WITH employee_tree AS (SELECT e0.EmployeeId,e0.ReportsTo,0 AS Level "
        "FROM employees AS e0 WHERE e0.ReportsTo IS NULL "
        "UNION SELECT e1.EmployeeId,e1.ReportsTo,Level + 1 FROM employees AS e1 "
        "INNER JOIN employee_tree AS et ON et.EmployeeId = e1.ReportsTo) "
        "SELECT * FROM employee_tree"
    )


def _recursive_counter() -> Statement:
    return (
        Statement()
        .with_recursive(
            "cnt",
            lambda q: q.select("1").union_all(
                lambda u: u.select("x + 1").from_("cnt").where("x < 5")
            ),
            columns=["x"],
        )
        .select("x")
        .from_("cnt")
    )


def test_with_recursive_keyword_on_standard():
    assert _recursive_counter().render() == (
        "WITH RECURSIVE cnt (x) AS (SELECT 1 UNION ALL SELECT x + 1 FROM cnt WHERE x < 5) "
        "SELECT x FROM cnt"
    )


def test_with_recursive_keyword_suppressed_on_sqlserver():
    assert _recursive_counter().render("sqlserver").startswith("WITH cnt (x) AS (")


def test_with_recursive_keyword_disabled_by_profile(profile_pg_no_recursive):
    assert _recursive_counter().render(profile_pg_no_recursive).startswith("WITH cnt (x) AS (")


def test_several_ctes_are_comma_joined():
    sql = (
        Statement()
        .with_("a", lambda q: q.select("1 AS n"))
        .with_("b", lambda q: q.select("n").from_("a"))
        .select("*")
        .from_("b")
        .render()
    )
    assert sql == "WITH a AS (SELECT 1 AS n),b AS (SELECT n FROM a) SELECT * FROM b"


# ---------------------------------------------------------------------------
# Pagination per dialect
# ---------------------------------------------------------------------------


def _page(limit: int | None = None, offset: int = 0) -> Statement:
    return Statement().select("*").from_("t").limit(limit).offset(offset)


@pytest.mark.parametrize(
    "limit, offset, expected",
    [
        (10, 5, "LIMIT 10 OFFSET 5"),
        (10, 0, "LIMIT 10"),
        (None, 5, "OFFSET 5"),
        (0, 0, "LIMIT 0"),
    ],
)
def test_standard_pagination(limit, offset, expected):
    assert _page(limit, offset).render() == f"SELECT * FROM t {expected}"


def test_postgres_is_standard():
    assert _page(10, 5).render("postgres") == "SELECT * FROM t LIMIT 10 OFFSET 5"


@pytest.mark.parametrize(
    "limit, offset, expected",
    [
        (10, 5, "OFFSET 5 ROWS FETCH NEXT 10 ROWS ONLY"),
        (10, 0, "OFFSET 0 ROWS FETCH NEXT 10 ROWS ONLY"),
        (None, 5, "OFFSET 5 ROWS"),
    ],
)
def test_sqlserver_pagination(limit, offset, expected):
    assert _page(limit, offset).render("sqlserver") == f"SELECT * FROM t {expected}"
    assert _page(limit, offset).render("mssql") == f"SELECT * FROM t {expected}"


def test_sqlite_offset_without_limit():
    assert _page(None, 5).render("sqlite") == "SELECT * FROM t LIMIT -1 OFFSET 5"
    assert _page(3, 5).render("sqlite") == "SELECT * FROM t LIMIT 3 OFFSET 5"


def test_mysql_offset_without_limit():
    assert _page(None, 5).render("mysql") == f"SELECT * FROM t LIMIT {MYSQL_MAX_ROWS} OFFSET 5"


def test_no_pagination_emits_nothing():
    for dialect in ("standard", "sqlite", "mysql", "sqlserver"):
        assert _page().render(dialect) == "SELECT * FROM t"


def test_limit_none_clears_limit():
    assert _page(10).limit(None).render() == "SELECT * FROM t"


def test_render_accepts_compiler_instance():
    q = _page(10, 5)
    assert q.render(SQLServerCompiler()) == "SELECT * FROM t OFFSET 5 ROWS FETCH NEXT 10 ROWS ONLY"
    assert StatementRenderer(MySQLCompiler()).render(q) == "SELECT * FROM t LIMIT 10 OFFSET 5"


def test_statement_profile_used_by_default(profile_sqlite):
    q = Statement(profile_sqlite).select("*").from_("t").offset(2)
    assert q.render() == "SELECT * FROM t LIMIT -1 OFFSET 2"


def test_nested_statements_render_with_outer_dialect(profile_sqlserver):
    q = Statement().select("*").from_(lambda s: s.select("*").from_("users").limit(1), "u")
    assert q.render(profile_sqlserver) == (
        "SELECT * FROM (SELECT * FROM users OFFSET 0 ROWS FETCH NEXT 1 ROWS ONLY) AS u"
    )


def test_unknown_dialect_raises():
    with pytest.raises(CompilationError):
        _page(1).render("oracle")


# ---------------------------------------------------------------------------
# INSERT
# ---------------------------------------------------------------------------


def test_insert_from_mapping():
    sql = insert("albums").values({"Title": "?", "ArtistId": "?"}).render()
    assert sql == "INSERT INTO albums (Title,ArtistId) VALUES (?,?)"


def test_insert_mapping_keeps_insertion_order():
    assert insert("t").values({"b": 1, "a": 2}).render() == "INSERT INTO t (b,a) VALUES (1,2)"


def test_insert_mapping_merges_and_overwrites_in_place():
    sql = insert("t").values({"a": "?", "b": "?"}).values({"a": 1, "c": "?"}).render()
    assert sql == "INSERT INTO t (a,b,c) VALUES (1,?,?)"


def test_insert_columns_and_positional_values():
    sql = insert("albums").columns("Title", "ArtistId").values("?", "?").render()
    assert sql == "INSERT INTO albums (Title,ArtistId) VALUES (?,?)"


def test_insert_positional_values_without_columns():
    assert insert("t").values(["?", "?"]).render() == "INSERT INTO t VALUES (?,?)"


def test_insert_explicit_columns_pick_from_mapping():
    sql = insert("t").columns("b", "a").values({"a": 1, "b": 2}).render()
    assert sql == "INSERT INTO t (b,a) VALUES (2,1)"


def test_insert_scalar_rendering():
    sql = insert("t").values({"a": None, "b": True, "c": False, "d": 1.5, "e": "'x'"}).render()
    assert sql == "INSERT INTO t (a,b,c,d,e) VALUES (NULL,TRUE,FALSE,1.5,'x')"


def test_insert_select():
    sql = insert("users").values(lambda q: q.select("*").from_("import_users")).render()
    assert sql == "INSERT INTO users SELECT * FROM import_users"


def test_insert_select_with_columns():
    sql = (
        insert("users")
        .columns("username", "email")
        .values(lambda q: q.select("username", "email").from_("import_users"))
        .render()
    )
    assert sql == "INSERT INTO users (username,email) SELECT username,email FROM import_users"


def test_insert_mapping_value_subquery():
    sql = (
        insert("playlists")
        .values({"PlaylistId": lambda q: q.select("MAX(PlaylistId) + 1").from_("playlists"), "Name": "?"})
        .render()
    )
    assert sql == (
        "INSERT INTO playlists (PlaylistId,Name) "
        "VALUES ((SELECT MAX(PlaylistId) + 1 FROM playlists),?)"
    )


def test_insert_with_cte():
    sql = (
        Statement()
        .with_("batch", lambda q: q.select("*").from_("import_users").where("batch_id = ?"))
        .insert("users")
        .values(lambda q: q.select("username", "forename", "surname", "email").from_("batch"))
        .render()
    )
    assert sql == (
        "WITH batch AS (SELECT * FROM import_users WHERE batch_id = ?) "
        "INSERT INTO users SELECT username,forename,surname,email FROM batch"
    )


def test_insert_without_values_raises():
    with pytest.raises(CompilationError) as exc_info:
        insert("t").render()
    assert exc_info.value.clause == "VALUES"


def test_insert_column_count_mismatch_raises():
    with pytest.raises(CompilationError):
        insert("t").columns("a", "b").values("?").render()


def test_insert_missing_mapping_column_raises():
    with pytest.raises(CompilationError):
        insert("t").columns("a", "b").values({"a": 1}).render()


# ---------------------------------------------------------------------------
# UPDATE / DELETE
# ---------------------------------------------------------------------------


def test_update_single_column():
    sql = update("playlists").set({"Name": "?"}).where("PlaylistId = ?").render()
    assert sql == "UPDATE playlists SET Name=? WHERE PlaylistId = ?"


def test_update_several_columns():
    sql = (
        update("users")
        .set({"forename": "?", "surname": "?", "email": "?"})
        .where("username = ?")
        .render()
    )
    assert sql == "UPDATE users SET forename=?,surname=?,email=? WHERE username = ?"


def test_update_values_mapping_is_set():
    assert update("t").values({"a": 1}).render() == "UPDATE t SET a=1"


def test_update_value_subquery_has_no_alias():
    sql = (
        update("users AS u")
        .set(
            {
                "forename": lambda q: q.select("forename")
                .from_("customers AS c")
                .where("c.email = u.email")
            }
        )
        .render()
    )
    assert sql == (
        "UPDATE users AS u SET forename=(SELECT forename FROM customers AS c WHERE c.email = u.email)"
    )


def test_update_with_cte():
    sql = (
        Statement()
        .with_("import", lambda q: q.select("*").from_("import").where("batch_id = ?"))
        .update("users")
        .set({"email": "?", "forename": "?", "surname": "?"})
        .render()
    )
    assert sql == (
        "WITH import AS (SELECT * FROM import WHERE batch_id = ?) "
        "UPDATE users SET email=?,forename=?,surname=?"
    )


def test_update_without_values_raises():
    with pytest.raises(CompilationError):
        update("t").where("id = ?").render()


def test_delete_with_where():
    assert delete("albums").where("ArtistId = ?").render() == "DELETE FROM albums WHERE ArtistId = ?"


def test_delete_without_where():
    assert delete("users").render() == "DELETE FROM users"


def test_delete_where_exists():
    sql = (
        delete("users")
        .where_not_exists(lambda q: q.select("1").from_("customers").where("customers.email = users.email"))
        .render()
    )
    assert sql == (
        "DELETE FROM users WHERE NOT EXISTS "
        "(SELECT 1 FROM customers WHERE customers.email = users.email)"
    )


# ---------------------------------------------------------------------------
# Rendering properties
# ---------------------------------------------------------------------------


def test_render_is_idempotent():
    q = _sales_report().having("Sales = 0").order_by("Sales", "DESC").limit(3)
    assert q.render() == q.render() == str(q)


def test_no_double_or_trailing_spaces():
    for q in (
        Statement().select("*").from_("t"),
        Statement().with_("c", lambda s: s.select("1")).select("*").from_("c").limit(1),
        delete("t"),
        update("t").set({"a": 1}),
        insert("t").values(["?"]),
    ):
        sql = q.render()
        assert "  " not in sql
        assert sql == sql.strip()


def test_each_compiler_reports_its_name():
    assert StandardCompiler().dialect_name == "standard"
    assert SQLiteCompiler().dialect_name == "sqlite"
    assert MySQLCompiler().dialect_name == "mysql"
    assert SQLServerCompiler().dialect_name == "sqlserver"


# ---------------------------------------------------------------------------
# Statements without a verb
# ---------------------------------------------------------------------------


def test_select_clauses_without_verb_render_as_select():
    sql = Statement().from_("artists").order_by("Name").limit(2).render()
    assert sql == "SELECT * FROM artists ORDER BY Name ASC LIMIT 2"


def test_cte_without_verb_renders_as_select_when_source_given():
    sql = Statement().with_("c", lambda s: s.select("1 AS n")).from_("c").render()
    assert sql == "WITH c AS (SELECT 1 AS n) SELECT * FROM c"


def test_only_where_renders_bare_condition_group():
    assert Statement().where("a = ?").and_where("b = ?").render() == "a = ? AND b = ?"


def test_values_without_verb_raises():
    with pytest.raises(CompilationError) as exc_info:
        Statement().values({"a": "?"}).render()
    assert exc_info.value.clause == "VALUES"


def test_cte_without_verb_or_select_clauses_raises():
    with pytest.raises(CompilationError) as exc_info:
        Statement().with_("c", lambda s: s.select("1")).where("x = 1").render()
    assert exc_info.value.clause == "WITH"


# ---------------------------------------------------------------------------
# Rejected renders
# ---------------------------------------------------------------------------


def test_insert_mapping_with_unlisted_column_raises():
    with pytest.raises(CompilationError) as exc_info:
        insert("t").columns("a").values({"a": "?", "b": "?"}).render()
    assert "b" in str(exc_info.value)


def test_sqlserver_rejects_zero_limit():
    with pytest.raises(CompilationError) as exc_info:
        _page(0, 5).render("sqlserver")
    assert exc_info.value.clause == "LIMIT"
    assert _page(0).render("standard") == "SELECT * FROM t LIMIT 0"


def test_having_closure_built_with_having_methods():
    sql = (
        Statement()
        .select("ArtistId", "COUNT(*) AS n")
        .from_("albums")
        .group_by("ArtistId")
        .having(lambda q: q.having("n > 1").or_having("ArtistId = ?"))
        .render()
    )
    assert sql == (
        "SELECT ArtistId,COUNT(*) AS n FROM albums GROUP BY ArtistId "
        "HAVING (n > 1 OR ArtistId = ?)"
    )
