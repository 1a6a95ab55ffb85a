"""Test staging context for in-memory seeding without database."""

from dataclasses import dataclass

import pytest

from bookstore import Author, Book
from seedwright import PersistenceContext, StagingContext
from seedwright.dependency import CircularReferenceError


def test_staging_context_satisfies_protocol():
    assert isinstance(StagingContext(), PersistenceContext)


def test_create_record_registers_only_when_asked():
    context = StagingContext()

    loose = context.create_record(Author, {"name": "a"})
    kept = context.create_record(Author, {"name": "b"}, persist=True)

    assert not context.is_tracked(loose)
    assert context.is_tracked(kept)
    assert context.pending == [kept]


def test_persist_twice_registers_once():
    context = StagingContext()
    author = Author(name="a")

    context.persist(author)
    context.persist(author)

    assert context.pending == [author]


@pytest.mark.asyncio
async def test_flush_generates_sequential_ids_per_type():
    """Should number each entity type separately, starting from 1."""
    context = StagingContext()
    authors = [Author(name=f"a{i}") for i in range(3)]
    books = [Book(title=f"b{i}") for i in range(2)]
    for entity in [*authors, *books]:
        context.persist(entity)

    await context.flush()

    assert [a.id for a in authors] == [1, 2, 3]
    assert [b.id for b in books] == [1, 2]
    assert context.pending == []
    assert context.flush_count == 1


@pytest.mark.asyncio
async def test_flush_keeps_explicit_ids():
    context = StagingContext()
    author = Author(name="fixed", id=99)
    context.persist(author)

    await context.flush()

    assert author.id == 99


@pytest.mark.asyncio
async def test_flush_writes_related_entities_first():
    context = StagingContext()
    author = Author(name="related")
    book = Book(title="owner", author=author)
    context.persist(book)

    await context.flush()

    assert author.id == 1
    assert book.author_id == 1
    assert context.is_tracked(author)
    assert context.get_data(Author) == [author]


@pytest.mark.asyncio
async def test_flush_detects_circular_references():
    context = StagingContext()
    first = Book(title="first")
    second = Book(title="second", author=first)
    first.author = second
    context.persist(first)

    with pytest.raises(CircularReferenceError, match="Circular reference"):
        await context.flush()


@pytest.mark.asyncio
async def test_flush_large_batch_keeps_dependency_order():
    """Should write every author before its book, in registration order."""
    context = StagingContext()
    books = [Book(title=f"b{i}", author=Author(name=f"a{i}")) for i in range(5000)]
    for book in books:
        context.persist(book)

    await context.flush()

    assert [b.author.id for b in books] == list(range(1, 5001))
    assert [b.author_id for b in books] == list(range(1, 5001))
    assert [b.id for b in books] == list(range(1, 5001))
    assert len(context.tracked) == 10000


@dataclass(eq=False)
class Address:
    city: str = ""


@dataclass(eq=False)
class Venue:
    name: str = ""
    address: Address | None = None
    id: int | None = None


@pytest.mark.asyncio
async def test_flush_leaves_value_objects_inline():
    """Should not cascade dataclass values without an id as their own rows."""
    context = StagingContext()
    address = Address(city="Winterfell")
    venue = Venue(name="Great Hall", address=address)
    context.persist(venue)

    await context.flush()

    assert venue.id == 1
    assert venue.address is address
    assert context.get_data(Address) == []
    assert not context.is_tracked(address)


@pytest.mark.asyncio
async def test_clear_detaches_but_keeps_data():
    context = StagingContext()
    author = Author(name="a")
    context.persist(author)
    await context.flush()

    context.clear()

    assert context.tracked == []
    assert context.clear_count == 1
    assert context.get_data(Author) == [author]


@pytest.mark.asyncio
async def test_clear_discards_pending():
    context = StagingContext()
    context.persist(Author(name="never flushed"))

    context.clear()
    await context.flush()

    assert context.get_data(Author) == []


@pytest.mark.asyncio
async def test_reset_restarts_sequences():
    context = StagingContext()
    context.persist(Author(name="a"))
    await context.flush()

    context.reset()
    author = Author(name="b")
    context.persist(author)
    await context.flush()

    assert author.id == 1
    assert context.get_data(Author) == [author]
