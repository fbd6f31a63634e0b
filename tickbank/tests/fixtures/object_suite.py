"""Suite of method tests bound to an object through build_banks()."""

from tickbank.core.registry import TestRegistry

checks = TestRegistry()


class Inventory:
    def __init__(self):
        self.items: list[str] = []

    @checks.assert_case(cancel_on_fail=True)
    def starts_empty(self, case):
        case.is_true(len(self.items) == 0)

    @checks.assert_case()
    def rejects_missing(self, case):
        case.is_false("sword" in self.items)


def build_banks(channel, sink):
    return checks.build_banks("inventory", receiver=Inventory(), channel=channel, sink=sink)
