import socket
from types import SimpleNamespace

import psutil
import pytest
from pytest_mock import MockerFixture

from devpair.enums import ServiceSlot
from devpair.launch import find_port_owners, free_port, is_port_available, port_for
from tests.conftest import LogCapture


def _conn(port: int, pid: int | None, status: str = psutil.CONN_LISTEN) -> SimpleNamespace:
    return SimpleNamespace(laddr=SimpleNamespace(ip="127.0.0.1", port=port), status=status, pid=pid)


class TestPortFor:
    @pytest.mark.parametrize(
        ("framework", "slot", "expected"),
        [
            ("react-vite", ServiceSlot.FRONTEND, 5173),
            ("angular", ServiceSlot.FRONTEND, 4200),
            ("nextjs", ServiceSlot.FRONTEND, 3000),
            ("vue", ServiceSlot.FRONTEND, 8080),
            ("django", ServiceSlot.BACKEND, 8000),
            ("flask", ServiceSlot.BACKEND, 5000),
            ("spring-boot", ServiceSlot.BACKEND, 8080),
            ("express", ServiceSlot.BACKEND, 3000),
        ],
    )
    def test_conventional_ports(self, framework: str, slot: ServiceSlot, expected: int) -> None:
        assert port_for(framework, slot) == expected

    def test_unknown_framework_uses_slot_default(self) -> None:
        assert port_for("custom", ServiceSlot.FRONTEND) == 3000
        assert port_for("custom", ServiceSlot.BACKEND) == 8080


class TestIsPortAvailable:
    def test_listening_port_is_unavailable(self) -> None:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
            listener.bind(("127.0.0.1", 0))
            listener.listen(1)
            port = listener.getsockname()[1]

            assert is_port_available(port) is False

    def test_released_port_is_available(self) -> None:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
            probe.bind(("127.0.0.1", 0))
            port = probe.getsockname()[1]

        assert is_port_available(port) is True

    def test_other_bind_errors_count_as_available(self, mocker: MockerFixture) -> None:
        sock = mocker.MagicMock()
        sock.__enter__.return_value = sock
        sock.bind.side_effect = PermissionError(13, "Permission denied")
        _ = mocker.patch("devpair.launch._ports.socket.socket", return_value=sock)

        assert is_port_available(80) is True


class TestFindPortOwners:
    def test_returns_sorted_unique_listening_pids(self, mocker: MockerFixture) -> None:
        _ = mocker.patch(
            "devpair.launch._ports.psutil.net_connections",
            return_value=[
                _conn(5173, 42),
                _conn(5173, 7),
                _conn(5173, 42),
                _conn(5173, 99, status=psutil.CONN_ESTABLISHED),
                _conn(8080, 11),
                _conn(5173, None),
            ],
        )

        assert find_port_owners(5173) == [7, 42]


class TestFreePort:
    def test_terminates_owner(self, mocker: MockerFixture, log_capture: LogCapture) -> None:
        _ = mocker.patch("devpair.launch._ports.find_port_owners", return_value=[42])
        process = mocker.MagicMock()
        process.name.return_value = "node"
        _ = mocker.patch("devpair.launch._ports.psutil.Process", return_value=process)

        assert free_port(5173, log_capture.logger) is True
        process.terminate.assert_called_once_with()
        process.kill.assert_not_called()
        assert log_capture.find("terminating_port_owner")[0]["pid"] == 42

    def test_kills_owner_that_ignores_terminate(self, mocker: MockerFixture) -> None:
        _ = mocker.patch("devpair.launch._ports.find_port_owners", return_value=[42])
        process = mocker.MagicMock()
        process.wait.side_effect = psutil.TimeoutExpired(3.0, pid=42)
        _ = mocker.patch("devpair.launch._ports.psutil.Process", return_value=process)

        assert free_port(5173) is True
        process.kill.assert_called_once_with()

    def test_vanished_owner_counts_as_freed(self, mocker: MockerFixture) -> None:
        _ = mocker.patch("devpair.launch._ports.find_port_owners", return_value=[42])
        _ = mocker.patch(
            "devpair.launch._ports.psutil.Process", side_effect=psutil.NoSuchProcess(42)
        )

        assert free_port(5173) is True

    def test_no_owner_found(self, mocker: MockerFixture) -> None:
        _ = mocker.patch("devpair.launch._ports.find_port_owners", return_value=[])

        assert free_port(5173) is False

    def test_access_denied_is_reported_not_raised(
        self, mocker: MockerFixture, log_capture: LogCapture
    ) -> None:
        _ = mocker.patch(
            "devpair.launch._ports.find_port_owners", side_effect=psutil.AccessDenied()
        )

        assert free_port(5173, log_capture.logger) is False
        assert log_capture.events == ["port_owner_lookup_failed"]

    def test_terminate_denied_is_not_freed(self, mocker: MockerFixture) -> None:
        _ = mocker.patch("devpair.launch._ports.find_port_owners", return_value=[1])
        process = mocker.MagicMock()
        process.terminate.side_effect = psutil.AccessDenied(1)
        _ = mocker.patch("devpair.launch._ports.psutil.Process", return_value=process)

        assert free_port(5173) is False
