import collections

import pytest

from bindery.errors import TargetNotFoundError
from bindery.naming import display_name, dotted_name, locate, normalize
from services import Mailer, Tools


def test_strings_lose_leading_separators_and_whitespace():
    assert normalize(".services.Mailer") == "services.Mailer"
    assert normalize("  services.Mailer ") == "services.Mailer"
    assert normalize("mailer") == "mailer"


def test_classes_normalise_to_dotted_path():
    assert normalize(Mailer) == "services.Mailer"
    assert dotted_name(collections.OrderedDict) == "collections.OrderedDict"


def test_other_keys_are_unchanged():
    def factory(c, p):
        return None

    assert normalize(factory) is factory
    assert normalize(42) == 42


def test_display_name():
    assert display_name("mailer") == "mailer"
    assert display_name(Mailer) == "services.Mailer"
    assert display_name(len) == "len"


def test_locate_module_attribute_and_nested_attribute():
    assert locate("collections.OrderedDict") is collections.OrderedDict
    assert locate("services.Tools.double") is Tools.double
    assert locate("collections") is collections


@pytest.mark.parametrize("path", ["", "nowhere.Missing", "services.Missing"])
def test_locate_missing_raises(path):
    with pytest.raises(TargetNotFoundError):
        locate(path)
