import pytest

from conftest import Person, make_doc, make_tab
from sheetrows.sheets import RowStore, SheetDatabase

@pytest.fixture
def doc():
    return make_doc(make_tab("People", [["id", "name"], ["1", "Alice"], ["2", "Bob"]], 0, 0),
                    make_tab("Empty", [["id", "name"]], 7, 1))

def test_unloaded(client):
    db = SheetDatabase(client)
    assert(not db)
    assert(len(db) == 0)
    assert(db.title == 'unconnected')
    with pytest.raises(KeyError):
        db["People"]

@pytest.mark.asyncio
async def test_load(client, transport, doc):
    transport.queue(doc)
    db = SheetDatabase(client)
    await db.load()
    assert(db)
    assert(len(db) == 2)
    assert(db.title == "Test Database")
    assert(db.url.endswith("/edit"))
    assert("People" in db)
    assert(7 in db)
    assert("Missing" not in db)
    assert(db.tab(7).title == "Empty")
    assert(db["People"].header == ["id", "name"])
    with pytest.raises(KeyError):
        db["Missing"]

@pytest.mark.asyncio
async def test_store(client, transport, doc):
    db = SheetDatabase(client)
    await db.load(doc)
    assert(transport.calls == [])
    store = db.store("People", Person)
    assert(isinstance(store, RowStore))
    assert(store.find("2").name == "Bob")
    assert(len(db.store("Empty", Person)) == 0)
