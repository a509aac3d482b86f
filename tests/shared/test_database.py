"""Tests for transactional sessions."""

import pytest
from catalogue.models import Product
from sqlalchemy import event, select, update


@pytest.fixture()
def sqlite_database(database):
    if not database.url.startswith("sqlite"):
        pytest.skip("SQLite locking behaviour")
    return database


def test_reads_are_not_blocked_by_an_open_writer(sqlite_database, make_product):
    product = make_product(stock=5)

    with sqlite_database.transaction() as writer:
        writer.execute(update(Product).where(Product.id == product.id).values(stock=4))

        with sqlite_database.transaction(read_only=True) as reader:
            assert reader.scalar(select(Product.stock).where(Product.id == product.id)) == 5

    with sqlite_database.transaction(read_only=True) as reader:
        assert reader.scalar(select(Product.stock).where(Product.id == product.id)) == 4


def test_only_writing_units_take_the_write_lock_up_front(sqlite_database):
    statements = []

    def record(conn, cursor, statement, *args):
        statements.append(statement)

    event.listen(sqlite_database.engine, "before_cursor_execute", record)
    try:
        with sqlite_database.transaction(read_only=True) as session:
            session.scalar(select(Product.id).limit(1))
        with sqlite_database.transaction() as session:
            session.scalar(select(Product.id).limit(1))
    finally:
        event.remove(sqlite_database.engine, "before_cursor_execute", record)

    assert [statement for statement in statements if statement.startswith("BEGIN")] == [
        "BEGIN DEFERRED",
        "BEGIN IMMEDIATE",
    ]
