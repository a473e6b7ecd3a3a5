"""
Schema catalog for the library database

The catalog is the single definition of tables, defaults and constraints.
PostgreSQL DDL is rendered from it and the in-memory store enforces it
directly, so both stores reject exactly the same writes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from library_integrity.models.enums import BookStatus, BorrowingStatus, UserRole, UserStatus

MIN_PUBLICATION_YEAR = 1450

# Predicates receive the candidate row and the store's current time
Predicate = Callable[[Dict[str, Any], datetime], bool]


@dataclass
class Column:
    """Column definition"""
    name: str
    sql_type: str
    nullable: bool = True
    default_sql: Optional[str] = None
    default: Optional[Callable[[datetime], Any]] = None
    generated: bool = False
    store_owned: bool = False

    @property
    def has_default(self) -> bool:
        return self.generated or self.default is not None


@dataclass
class CheckConstraint:
    name: str
    column: str
    sql: str
    predicate: Predicate


@dataclass
class ForeignKey:
    name: str
    column: str
    ref_table: str
    ref_column: str
    on_delete: str = "RESTRICT"  # CASCADE, RESTRICT or SET NULL


@dataclass
class Table:
    """Complete table definition"""
    name: str
    primary_key: str
    columns: List[Column]
    checks: List[CheckConstraint] = field(default_factory=list)
    unique: List[str] = field(default_factory=list)
    foreign_keys: List[ForeignKey] = field(default_factory=list)
    touch_column: Optional[str] = None  # refreshed by the update trigger

    def column(self, name: str) -> Column:
        for col in self.columns:
            if col.name == name:
                return col
        raise KeyError(f'column "{name}" of relation "{self.name}" does not exist')

    def has_column(self, name: str) -> bool:
        return any(col.name == name for col in self.columns)

    @property
    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]

    @property
    def writable_columns(self) -> List[str]:
        return [col.name for col in self.columns if not col.generated and not col.store_owned]

    def unique_constraint_name(self, column: str) -> str:
        return f"{self.name}_{column}_key"


def _known(row: Dict[str, Any], *columns: str) -> bool:
    """SQL CHECK semantics: a NULL operand never fails the check"""
    return all(row.get(col) is not None for col in columns)


def _enum_check(table: str, column: str, values: List[str]) -> CheckConstraint:
    allowed = ", ".join(f"'{v}'" for v in values)
    return CheckConstraint(
        name=f"chk_{table}_{column}",
        column=column,
        sql=f"{column} IN ({allowed})",
        predicate=lambda row, now: not _known(row, column) or row[column] in values,
    )


def _id(name: str) -> Column:
    return Column(name, "SERIAL", nullable=False, default_sql=None, generated=True)


def _timestamps() -> List[Column]:
    return [
        Column("created_at", "TIMESTAMPTZ", nullable=False, default_sql="CURRENT_TIMESTAMP",
               default=lambda now: now, store_owned=True),
        Column("updated_at", "TIMESTAMPTZ", nullable=False, default_sql="CURRENT_TIMESTAMP",
               default=lambda now: now, store_owned=True),
    ]


def _catalog_table(name: str, primary_key: str) -> Table:
    return Table(
        name=name,
        primary_key=primary_key,
        columns=[
            _id(primary_key),
            Column("name", "VARCHAR(150)", nullable=False),
            Column("created_at", "TIMESTAMPTZ", nullable=False, default_sql="CURRENT_TIMESTAMP",
                   default=lambda now: now, store_owned=True),
        ],
        unique=["name"],
    )


AUTHORS = _catalog_table("authors", "author_id")
PUBLISHERS = _catalog_table("publishers", "publisher_id")
CATEGORIES = _catalog_table("categories", "category_id")

USERS = Table(
    name="users",
    primary_key="user_id",
    columns=[
        _id("user_id"),
        Column("username", "VARCHAR(100)", nullable=False),
        Column("email", "VARCHAR(255)", nullable=False),
        Column("full_name", "VARCHAR(150)"),
        Column("phone", "VARCHAR(30)"),
        Column("role", "VARCHAR(20)", nullable=False, default_sql=f"'{UserRole.MEMBER.value}'",
               default=lambda now: UserRole.MEMBER.value),
        Column("status", "VARCHAR(20)", nullable=False, default_sql=f"'{UserStatus.ACTIVE.value}'",
               default=lambda now: UserStatus.ACTIVE.value),
        *_timestamps(),
    ],
    checks=[
        _enum_check("users", "role", UserRole.values()),
        _enum_check("users", "status", UserStatus.values()),
    ],
    unique=["username", "email"],
    touch_column="updated_at",
)

BOOKS = Table(
    name="books",
    primary_key="book_id",
    columns=[
        _id("book_id"),
        Column("isbn", "VARCHAR(30)", nullable=False),
        Column("title", "VARCHAR(255)", nullable=False),
        Column("author_id", "INTEGER"),
        Column("publisher_id", "INTEGER"),
        Column("category_id", "INTEGER"),
        Column("publication_year", "INTEGER"),
        Column("pages", "INTEGER"),
        Column("language", "VARCHAR(50)"),
        Column("description", "TEXT"),
        Column("total_copies", "INTEGER", nullable=False, default_sql="1", default=lambda now: 1),
        Column("available_copies", "INTEGER", nullable=False, default_sql="1", default=lambda now: 1),
        Column("price", "NUMERIC(12, 2)"),
        Column("location", "VARCHAR(100)"),
        Column("status", "VARCHAR(20)", nullable=False, default_sql=f"'{BookStatus.AVAILABLE.value}'",
               default=lambda now: BookStatus.AVAILABLE.value),
        *_timestamps(),
    ],
    checks=[
        CheckConstraint(
            name="chk_books_available_copies",
            column="available_copies",
            sql="available_copies >= 0 AND available_copies <= total_copies",
            predicate=lambda row, now: (
                not _known(row, "available_copies")
                or (row["available_copies"] >= 0
                    and (not _known(row, "total_copies") or row["available_copies"] <= row["total_copies"]))
            ),
        ),
        CheckConstraint(
            name="chk_books_total_copies",
            column="total_copies",
            sql="total_copies >= 0",
            predicate=lambda row, now: not _known(row, "total_copies") or row["total_copies"] >= 0,
        ),
        CheckConstraint(
            name="chk_books_publication_year",
            column="publication_year",
            sql=(f"publication_year >= {MIN_PUBLICATION_YEAR} "
                 "AND publication_year <= EXTRACT(YEAR FROM CURRENT_DATE)"),
            predicate=lambda row, now: (
                not _known(row, "publication_year")
                or MIN_PUBLICATION_YEAR <= row["publication_year"] <= now.year
            ),
        ),
        CheckConstraint(
            name="chk_books_pages",
            column="pages",
            sql="pages > 0",
            predicate=lambda row, now: not _known(row, "pages") or row["pages"] > 0,
        ),
        CheckConstraint(
            name="chk_books_price",
            column="price",
            sql="price >= 0",
            predicate=lambda row, now: not _known(row, "price") or row["price"] >= 0,
        ),
        _enum_check("books", "status", BookStatus.values()),
    ],
    unique=["isbn"],
    foreign_keys=[
        ForeignKey("books_author_id_fkey", "author_id", "authors", "author_id", "SET NULL"),
        ForeignKey("books_publisher_id_fkey", "publisher_id", "publishers", "publisher_id", "SET NULL"),
        ForeignKey("books_category_id_fkey", "category_id", "categories", "category_id", "SET NULL"),
    ],
    touch_column="updated_at",
)

BORROWINGS = Table(
    name="borrowings",
    primary_key="borrowing_id",
    columns=[
        _id("borrowing_id"),
        Column("user_id", "INTEGER", nullable=False),
        Column("book_id", "INTEGER", nullable=False),
        Column("borrow_date", "TIMESTAMPTZ", nullable=False, default_sql="CURRENT_TIMESTAMP",
               default=lambda now: now),
        Column("due_date", "TIMESTAMPTZ", nullable=False),
        Column("return_date", "TIMESTAMPTZ"),
        Column("status", "VARCHAR(20)", nullable=False, default_sql=f"'{BorrowingStatus.BORROWED.value}'",
               default=lambda now: BorrowingStatus.BORROWED.value),
        Column("fine_amount", "NUMERIC(10, 2)", nullable=False, default_sql="0", default=lambda now: 0),
        Column("notes", "TEXT"),
        *_timestamps(),
    ],
    checks=[
        CheckConstraint(
            name="chk_borrowings_due_date",
            column="due_date",
            sql="due_date > borrow_date",
            predicate=lambda row, now: (
                not _known(row, "due_date", "borrow_date") or row["due_date"] > row["borrow_date"]
            ),
        ),
        CheckConstraint(
            name="chk_borrowings_fine_amount",
            column="fine_amount",
            sql="fine_amount >= 0",
            predicate=lambda row, now: not _known(row, "fine_amount") or row["fine_amount"] >= 0,
        ),
        CheckConstraint(
            name="chk_borrowings_return_date",
            column="return_date",
            sql="return_date >= borrow_date",
            predicate=lambda row, now: (
                not _known(row, "return_date", "borrow_date") or row["return_date"] >= row["borrow_date"]
            ),
        ),
        _enum_check("borrowings", "status", BorrowingStatus.values()),
    ],
    foreign_keys=[
        ForeignKey("borrowings_user_id_fkey", "user_id", "users", "user_id", "CASCADE"),
        ForeignKey("borrowings_book_id_fkey", "book_id", "books", "book_id", "RESTRICT"),
    ],
    touch_column="updated_at",
)

# Creation order; referenced tables come first
TABLES: Dict[str, Table] = {
    table.name: table
    for table in (AUTHORS, PUBLISHERS, CATEGORIES, USERS, BOOKS, BORROWINGS)
}


def get_table(name: str) -> Table:
    if name not in TABLES:
        raise KeyError(f'relation "{name}" does not exist')
    return TABLES[name]


def referencing_keys(table_name: str) -> List[Tuple[Table, ForeignKey]]:
    """Foreign keys in other tables that point at ``table_name``"""
    return [
        (table, fk)
        for table in TABLES.values()
        for fk in table.foreign_keys
        if fk.ref_table == table_name
    ]


def _build_constraint_index() -> Dict[str, Tuple[str, str]]:
    index = {}
    for table in TABLES.values():
        for check in table.checks:
            index[check.name] = (table.name, check.column)
        for column in table.unique:
            index[table.unique_constraint_name(column)] = (table.name, column)
        for fk in table.foreign_keys:
            index[fk.name] = (table.name, fk.column)
    return index


_CONSTRAINT_INDEX = _build_constraint_index()


def find_constraint(name: str) -> Optional[Tuple[str, str]]:
    """Return (table, column) owning the named constraint"""
    return _CONSTRAINT_INDEX.get(name)


TOUCH_FUNCTION_DDL = """
CREATE OR REPLACE FUNCTION touch_updated_at() RETURNS TRIGGER AS $$
BEGIN
    NEW.updated_at = clock_timestamp();
    RETURN NEW;
END;
$$ LANGUAGE plpgsql
""".strip()


def _column_ddl(col: Column) -> str:
    col_def = f"{col.name} {col.sql_type}"
    if not col.nullable and not col.generated:
        col_def += " NOT NULL"
    if col.default_sql is not None:
        col_def += f" DEFAULT {col.default_sql}"
    return col_def


def generate_table_ddl(table: Table) -> str:
    parts = [_column_ddl(col) for col in table.columns]
    parts.append(f"PRIMARY KEY ({table.primary_key})")
    for column in table.unique:
        parts.append(f"CONSTRAINT {table.unique_constraint_name(column)} UNIQUE ({column})")
    for check in table.checks:
        parts.append(f"CONSTRAINT {check.name} CHECK ({check.sql})")
    for fk in table.foreign_keys:
        parts.append(
            f"CONSTRAINT {fk.name} FOREIGN KEY ({fk.column}) "
            f"REFERENCES {fk.ref_table} ({fk.ref_column}) ON DELETE {fk.on_delete}"
        )
    body = ",\n    ".join(parts)
    return f"CREATE TABLE IF NOT EXISTS {table.name} (\n    {body}\n)"


def generate_trigger_ddl(table: Table) -> List[str]:
    if not table.touch_column:
        return []
    trigger = f"trg_{table.name}_{table.touch_column}"
    return [
        f"DROP TRIGGER IF EXISTS {trigger} ON {table.name}",
        f"CREATE TRIGGER {trigger} BEFORE UPDATE ON {table.name} "
        f"FOR EACH ROW EXECUTE FUNCTION touch_updated_at()",
    ]


def generate_ddl_statements() -> List[str]:
    """Generate DDL statements to create the schema in an empty database"""
    statements = [generate_table_ddl(table) for table in TABLES.values()]
    statements.append(TOUCH_FUNCTION_DDL)
    for table in TABLES.values():
        statements.extend(generate_trigger_ddl(table))
    return statements
