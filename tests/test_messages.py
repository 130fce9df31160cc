import pytest

from app.core.errors import InvalidInput, UnauthorizedOrNotFound
from app.matches.repository import get_or_create_match
from app.messages.service import get_messages, mark_messages_as_read, message_out, send_message
from tests.factories import make_member


@pytest.fixture
async def couple(db):
    a = await make_member(db, first_name="Ana", photos=1)
    b = await make_member(db, first_name="Beto", gender="male")
    match, _ = await get_or_create_match(db, a, b)
    await db.commit()
    return a, b, match.id


async def test_read_flow(db, couple):
    a, b, match_id = couple

    msg = await send_message(db, a, match_id, "hi")
    await db.commit()
    assert msg.read is False
    assert msg.sender_id == a

    seen_by_b = await get_messages(db, b, match_id)
    assert [(m.content, m.read) for m in seen_by_b] == [("hi", False)]

    assert await mark_messages_as_read(db, b, match_id) == 1
    await db.commit()

    seen_by_b = await get_messages(db, b, match_id)
    assert [(m.content, m.read) for m in seen_by_b] == [("hi", True)]


async def test_mark_as_read_is_idempotent_and_skips_own_messages(db, couple):
    a, b, match_id = couple
    await send_message(db, a, match_id, "hola")
    await send_message(db, b, match_id, "hola! 👋")
    await send_message(db, a, match_id, "¿qué tal?")
    await db.commit()

    assert await mark_messages_as_read(db, b, match_id) == 2
    await db.commit()
    assert await mark_messages_as_read(db, b, match_id) == 0

    msgs = await get_messages(db, a, match_id)
    # el de b sigue sin leer: solo a puede marcarlo
    assert {m.content: m.read for m in msgs} == {"hola": True, "hola! 👋": False, "¿qué tal?": True}


async def test_messages_come_in_send_order(db, couple):
    a, b, match_id = couple
    for i in range(5):
        await send_message(db, a if i % 2 == 0 else b, match_id, f"m{i}")
    await db.commit()

    msgs = await get_messages(db, b, match_id)
    assert [m.content for m in msgs] == [f"m{i}" for i in range(5)]


async def test_non_participant_cannot_touch_the_match(db, couple):
    a, b, match_id = couple
    d = await make_member(db, first_name="Dani")

    with pytest.raises(UnauthorizedOrNotFound):
        await get_messages(db, d, match_id)
    with pytest.raises(UnauthorizedOrNotFound):
        await send_message(db, d, match_id, "hey")
    with pytest.raises(UnauthorizedOrNotFound):
        await mark_messages_as_read(db, d, match_id)
    with pytest.raises(UnauthorizedOrNotFound):
        await get_messages(db, a, "no-such-match")


async def test_blank_message_rejected(db, couple):
    a, _, match_id = couple
    with pytest.raises(InvalidInput):
        await send_message(db, a, match_id, "   ")


async def test_message_out_includes_sender_summary(db, couple):
    a, _, match_id = couple
    msg = await send_message(db, a, match_id, "  con espacios  ")
    await db.commit()

    out = message_out(msg)
    assert out["content"] == "con espacios"
    assert out["sender"]["first_name"] == "Ana"
    assert out["sender"]["photo"]["order"] == 0
