"""
Schema catalog and the PostgreSQL DDL rendered from it
"""

from library_integrity.database.schema import (
    BOOKS,
    BORROWINGS,
    TABLES,
    TOUCH_FUNCTION_DDL,
    USERS,
    find_constraint,
    generate_ddl_statements,
    generate_table_ddl,
    generate_trigger_ddl,
    referencing_keys,
)


class TestCatalog:

    def test_referenced_tables_are_created_first(self):
        order = list(TABLES)
        for table in TABLES.values():
            for fk in table.foreign_keys:
                assert order.index(fk.ref_table) < order.index(table.name)

    def test_writable_columns_exclude_generated_and_timestamps(self):
        assert "user_id" not in USERS.writable_columns
        assert "created_at" not in USERS.writable_columns
        assert "updated_at" not in USERS.writable_columns
        assert "username" in USERS.writable_columns

    def test_find_constraint_maps_names_to_columns(self):
        assert find_constraint("borrowings_book_id_fkey") == ("borrowings", "book_id")
        assert find_constraint("users_email_key") == ("users", "email")
        assert find_constraint("chk_books_available_copies") == ("books", "available_copies")
        assert find_constraint("no_such_constraint") is None

    def test_books_are_referenced_by_borrowings_only(self):
        referencing = [(table.name, fk.on_delete) for table, fk in referencing_keys("books")]
        assert referencing == [("borrowings", "RESTRICT")]

    def test_check_predicates_pass_on_null(self):
        for table in TABLES.values():
            empty_row = {col.name: None for col in table.columns}
            for check in table.checks:
                assert check.predicate(empty_row, None), check.name


class TestDDL:

    def test_books_ddl_declares_named_constraints(self):
        ddl = generate_table_ddl(BOOKS)

        assert ddl.startswith("CREATE TABLE IF NOT EXISTS books")
        assert "isbn VARCHAR(30) NOT NULL" in ddl
        assert "CONSTRAINT books_isbn_key UNIQUE (isbn)" in ddl
        assert "CONSTRAINT chk_books_available_copies CHECK" in ddl
        assert "publication_year >= 1450" in ddl
        assert "REFERENCES authors (author_id) ON DELETE SET NULL" in ddl

    def test_borrowings_ddl_declares_delete_rules(self):
        ddl = generate_table_ddl(BORROWINGS)

        assert "REFERENCES users (user_id) ON DELETE CASCADE" in ddl
        assert "REFERENCES books (book_id) ON DELETE RESTRICT" in ddl
        assert "CHECK (due_date > borrow_date)" in ddl
        assert "borrow_date TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP" in ddl

    def test_trigger_uses_statement_independent_clock(self):
        assert "clock_timestamp()" in TOUCH_FUNCTION_DDL
        drop, create = generate_trigger_ddl(USERS)
        assert drop == "DROP TRIGGER IF EXISTS trg_users_updated_at ON users"
        assert "BEFORE UPDATE ON users" in create

    def test_statements_are_ordered_tables_function_triggers(self):
        statements = generate_ddl_statements()
        function_index = statements.index(TOUCH_FUNCTION_DDL)

        assert all(s.startswith("CREATE TABLE") for s in statements[:len(TABLES)])
        assert function_index == len(TABLES)
        assert all("TRIGGER" in s for s in statements[function_index + 1:])
