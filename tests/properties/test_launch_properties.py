"""Property-based tests for launch planning.

- Command resolution never yields an empty command
- Custom commands are returned verbatim
- Unknown frameworks fall back to the slot's default port
- Restart delays grow linearly until the budget is spent
"""

from hypothesis import assume, given, strategies as st

from devpair.enums import ServiceSlot
from devpair.launch import Framework, port_for, resolve_command
from devpair.supervisor import LinearBackoff

slots = st.sampled_from(list(ServiceSlot))
known_ids = st.sampled_from([framework.value for framework in Framework])
unknown_ids = st.text(max_size=20).filter(lambda value: value not in set(Framework))
commands = st.text(min_size=1, max_size=60)


class TestResolveCommandProperties:
    @given(framework_id=known_ids | unknown_ids, slot=slots, custom=st.none() | st.text(max_size=30))
    def test_never_empty(self, framework_id: str, slot: ServiceSlot, custom: str | None) -> None:
        assert resolve_command(framework_id, slot, custom) != ""

    @given(slot=slots, custom=commands)
    def test_custom_command_is_verbatim(self, slot: ServiceSlot, custom: str) -> None:
        assert resolve_command("custom", slot, custom) == custom

    @given(framework_id=known_ids, slot=slots, custom=commands)
    def test_custom_command_ignored_for_known_frameworks(
        self, framework_id: str, slot: ServiceSlot, custom: str
    ) -> None:
        assume(framework_id != Framework.CUSTOM)
        assert resolve_command(framework_id, slot, custom) == resolve_command(framework_id, slot)


class TestPortProperties:
    @given(framework_id=unknown_ids)
    def test_unknown_frameworks_use_slot_default(self, framework_id: str) -> None:
        assert port_for(framework_id, ServiceSlot.FRONTEND) == 3000
        assert port_for(framework_id, ServiceSlot.BACKEND) == 8080

    @given(framework_id=known_ids, slot=slots)
    def test_ports_are_valid(self, framework_id: str, slot: ServiceSlot) -> None:
        assert 1 <= port_for(framework_id, slot) <= 65535


class TestBackoffProperties:
    @given(
        step=st.floats(min_value=0, max_value=60, allow_nan=False),
        count=st.integers(min_value=1, max_value=100),
    )
    def test_delay_is_linear(self, step: float, count: int) -> None:
        backoff = LinearBackoff(step=step)

        assert backoff.delay(count) == count * step
        assert backoff.delay(count + 1) >= backoff.delay(count)

    @given(limit=st.integers(min_value=0, max_value=20), count=st.integers(min_value=0, max_value=40))
    def test_exhausted_only_at_limit(self, limit: int, count: int) -> None:
        assert LinearBackoff(limit=limit).exhausted(count) is (count >= limit)
