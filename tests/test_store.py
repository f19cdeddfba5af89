import pytest

from conftest import Item, Person, append_response, make_tab, update_response
from sheetrows import SheetError
from sheetrows.sheets import NIL, RowStore, TabTable, load_tab_table

def people_table(*rows: list[str]) -> TabTable:
    return load_tab_table(make_tab("People", [["id", "name"], *rows]))

def people(client, *rows: list[str]) -> RowStore:
    return RowStore(client, "People", people_table(*rows), Person)

def test_construction(client):
    store = people(client, ["1", "Alice"], ["2", "Bob"])
    assert(len(store) == 2)
    assert(store.rows[0] == Person(row=2, id="1", name="Alice"))
    assert(set(store.index) == {"1", "2"})
    assert(store.next_row == 2)
    assert(store.position(3) == 1)

def test_header_mismatch(client):
    table = load_tab_table(make_tab("People", [["name", "id"], ["Alice", "1"]]))
    with pytest.raises(SheetError, match="Expected table.header to be id,name not name,id"):
        RowStore(client, "People", table, Person)
    # nothing to check on an empty table
    empty = TabTable(header=["name", "id"])
    assert(RowStore(client, "People", empty, Person).check_header())

def test_unknown_key_column(client):
    with pytest.raises(SheetError, match="no key column 'code'"):
        RowStore(client, "People", people_table(), Person, key_column="code")

def test_unreadable_cell(client):
    table = load_tab_table(make_tab("Items", [["id", "count", "price", "active"], ["a", "1,234", "$2.50", "TRUE"]]))
    with pytest.raises(SheetError, match="cannot read '1,234' as integer"):
        RowStore(client, "Items", table, Item)

def test_values_in_header_order(client):
    store = people(client)
    assert(store.values(Person(id="x")) == ["x", NIL])

@pytest.mark.asyncio
async def test_create_in_empty_table(client, transport):
    store = people(client)
    transport.queue(append_response("People", 2, ["x", "n"]))
    created = await store.create(Person(id="x", name="n"))
    method, url, body = transport.calls[0]
    assert(method == "POST")
    # position 0 is an empty table, anchored at the header row
    assert("/values/People!A1:end:append?" in url)
    assert(body == {"values": [["x", "n"]]})
    assert(created == Person(row=2, id="x", name="n"))
    assert(store.index["x"] is created)
    assert(store.find("x") is created)
    assert(store.rows == [created])

@pytest.mark.asyncio
async def test_create_in_reordered_empty_table(client, transport):
    store = RowStore(client, "People", TabTable(header=["name", "id"]), Person)
    transport.queue(append_response("People", 2, ["n", "x"]))
    created = await store.create(Person(id="x", name="n"))
    assert(transport.calls[0][2] == {"values": [["n", "x"]]})
    assert(created == Person(row=2, id="x", name="n"))
    assert(store.find("x") is created)
    assert(store.find("n") is None)

@pytest.mark.asyncio
async def test_create_with_undeclared_tab_column(client, transport):
    store = RowStore(client, "People", TabTable(header=["id", "name", "email"]), Person)
    with pytest.raises(SheetError, match="Person has no column for email in People"):
        await store.create(Person(id="x", name="n"))
    assert(transport.calls == [])
    assert(len(store) == 0)

@pytest.mark.asyncio
async def test_create_appends_at_row_count(client, transport, monkeypatch):
    store = people(client, ["1", "Alice"])
    seen = []

    async def append_row(tab, row, values):
        seen.append((tab, row, values))
        return await type(client).append_row(client, tab, row, values)

    monkeypatch.setattr(client, "append_row", append_row)
    transport.queue(append_response("People", 3, ["2", "Bob"]))
    await store.create(Person(id="2", name="Bob"))
    assert(seen == [("People", 1, ["2", "Bob"])])

@pytest.mark.asyncio
async def test_create_takes_server_echo(client, transport):
    store = RowStore(client, "Items", load_tab_table(make_tab("Items", [["id", "count", "price", "active"]])), Item)
    # the service stored the row further down and reformatted the price
    transport.queue(append_response("Items", 9, ["a", "3", "2.5", "TRUE"]))
    created = await store.save(Item(id="a", count=3, price=2.50, active=True))
    assert(created == Item(row=9, id="a", count=3, price=2.5, active=True))
    assert(store.find(9) is created)

@pytest.mark.asyncio
async def test_create_without_echo_uses_next_position(client, transport):
    store = people(client, ["1", "Alice"], ["2", "Bob"])
    transport.queue({"spreadsheetId": "s", "updates": {"updatedRange": "People!A:B"}})
    created = await store.create(Person(id="3", name="Carol"))
    assert(created.row == 4)
    assert(created.name == "Carol")

@pytest.mark.asyncio
async def test_create_errors(client, transport):
    store = people(client)
    with pytest.raises(SheetError, match='"id" must be assigned for row 0'):
        await store.create(Person(name="nobody"))
    with pytest.raises(SheetError, match='"x" row must be 0, not 3 to create'):
        await store.create(Person(row=3, id="x"))
    assert(transport.calls == [])

@pytest.mark.asyncio
async def test_failed_create_leaves_store_alone(client, transport):
    store = people(client, ["1", "Alice"])
    transport.queue({"error": {"code": 500, "message": "backend error"}}, ok=False, status_code=500)
    with pytest.raises(SheetError, match="backend error"):
        await store.create(Person(id="2", name="Bob"))
    assert(len(store) == 1)
    assert(set(store.index) == {"1"})

@pytest.mark.asyncio
async def test_update(client, transport):
    store = people(client, ["x", "original"])
    transport.queue(update_response("People", 2, ["x", "changed"]))
    updated = await store.update(Person(row=2, id="x", name="changed"))
    method, url, body = transport.calls[0]
    assert(method == "PUT")
    assert("/values/People!A2:end?valueInputOption=RAW" in url)
    assert(body == {"values": [["x", "changed"]]})
    assert(updated == Person(row=2, id="x", name="changed"))
    assert(store.rows[0] is updated)
    assert(store.find("x").name == "changed")

@pytest.mark.asyncio
async def test_update_changes_key(client, transport):
    store = people(client, ["x", "n"])
    transport.queue(update_response("People", 2, ["y", "n"]))
    await store.save(Person(row=2, id="y", name="n"))
    assert(store.find("x") is None)
    assert(store.find("y").row == 2)

@pytest.mark.asyncio
async def test_update_errors(client, transport):
    store = people(client, ["x", "n"])
    with pytest.raises(SheetError, match='"x" row must be > 0 to update'):
        await store.update(Person(id="x"))
    with pytest.raises(SheetError, match='"id" must be assigned for row 2'):
        await store.update(Person(row=2))
    with pytest.raises(SheetError, match='"x" row 5 is not in People'):
        await store.update(Person(row=5, id="x"))
    assert(transport.calls == [])

@pytest.mark.asyncio
async def test_failed_update_leaves_store_alone(client, transport):
    store = people(client, ["x", "n"])
    before = store.rows[0]
    transport.queue({"error": {"message": "quota"}}, ok=False, status_code=429)
    with pytest.raises(SheetError):
        await store.update(Person(row=2, id="x", name="changed"))
    assert(store.rows[0] is before)
    assert(store.index["x"] is before)

@pytest.mark.asyncio
async def test_rows_out_of_append_order(client, transport):
    """
    List position and row number drift apart once the service places rows
    somewhere other than straight after the last one we hold.
    """
    store = people(client, ["1", "Alice"], ["2", "Bob"])
    transport.queue(append_response("People", 10, ["3", "Carol"]))
    carol = await store.create(Person(id="3", name="Carol"))
    assert(carol.row == 10)
    assert(store.position(10) == 2)

    transport.queue(update_response("People", 10, ["3", "Caroline"]))
    updated = await store.update(carol.assign({"name": "Caroline"}))
    assert(store.rows[2] is updated)
    assert(store.rows[0].name == "Alice" and store.rows[1].name == "Bob")

    transport.queue(update_response("People", 3, ["2", "Robert"]))
    bob = await store.save(store.find("2").assign({"name": "Robert"}))
    assert(store.rows[1] is bob)
    assert([r.name for r in store] == ["Alice", "Robert", "Caroline"])

def test_find(client):
    store = people(client, ["1", "Alice"], ["2", "Bob"], ["3", "Alice"])
    assert(store.find("2").name == "Bob")
    assert(store.find("2", "id") is store.index["2"])
    # numbers look up row position
    assert(store.find(2).id == "1")
    assert(store.find(4).id == "3")
    assert(store.find(99) is None)
    # non key columns scan for the first match
    assert(store.find("Alice", "name").id == "1")
    assert(store.find("Nobody", "name") is None)
    assert(store.find("") is None)
    assert(store.find(None) is None)
    assert(store.find("missing") is None)

def test_find_index_matches_scan(client):
    store = people(client, ["1", "Alice"], ["2", "Bob"], ["3", "Carol"])
    for r in store:
        scanned = next(x for x in store.rows if x.id == r.id)
        assert(store.find(r.id, "id") is scanned)
