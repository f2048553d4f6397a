#
# Pytest Fixtures
#

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from scribe.render import inline


# Classes --------------------------------------------------------------------------------------------------------------

class Enumerator:
    """Enum-like constant that renders itself as `Name = { ... }`."""

    def __init__(self, name: str, **data: Any) -> None:
        self.name = name
        self.data = data

    def __scribe__(self) -> str:
        return f"{self.name} = {inline(self.data)}"


class Suit(list):
    """Ordered container carrying a display tag."""
    __scribe_tag__ = "Suit"


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def suit() -> Suit:
    """Tagged sequence of four self-rendering enumerators."""
    return Suit([
        Enumerator("Clubs", abbrev="C", color="black"),
        Enumerator("Diamonds", abbrev="D", color="red"),
        Enumerator("Hearts", abbrev="H", color="red"),
        Enumerator("Spades", abbrev="S", color="black"),
    ])


@pytest.fixture
def self_ref() -> dict:
    """Mapping that contains itself."""
    d = {"name": "root"}
    d["self"] = d
    return d


@pytest.fixture
def diamond() -> dict:
    """Two paths from the root to the same list."""
    shared = [1, 2]
    return {"left": shared, "right": shared}
