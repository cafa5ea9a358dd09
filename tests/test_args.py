from utils.args import parse_id, parse_options, split_pipes
from utils.errors import InvalidInput, NotFound, PersistenceFailure, user_message


def test_parse_options():
    positional, options = parse_options(["500", "upi", "every=monthly", "UPI_ID=a@b", "start=2026-11-01T09:00"])
    assert positional == ["500", "upi"]
    assert options == {"every": "monthly", "upi_id": "a@b", "start": "2026-11-01T09:00"}


def test_split_pipes():
    assert split_pipes(["Asha", "Verma", "|", "a@b.com", "|x"]) == ["Asha Verma", "a@b.com", "x"]


def test_parse_id():
    assert parse_id("12") == 12
    assert parse_id("#7") == 7
    assert parse_id("0") is None
    assert parse_id("abc") is None


def test_user_messages():
    assert user_message(InvalidInput(["one", "two"])) == "⚠️ one\n⚠️ two"
    assert user_message(NotFound("Receipt not found.")) == "⚠️ Receipt not found."
    assert "Nothing was changed" in user_message(PersistenceFailure("duplicate key"))
