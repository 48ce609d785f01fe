"""Test the regeneration state machine.

Tests for spiralgalaxy.controller.regeneration:
    - Synchronous commit installs and releases the previous buffer
    - Failed commits leave the installed buffer untouched
    - Ticketed requests: only the latest result is installed
    - IDLE/GENERATING state transitions
    - Install listeners observe a consistent buffer

Run:
    pytest tests/test_regeneration.py -v
"""

import pytest

from spiralgalaxy.controller.regeneration import GalaxyContext, GenerationState, RegenerationController
from spiralgalaxy.model.errors import InvalidParameterError, ResourceExhaustionError
from spiralgalaxy.model.generator import PointFieldGenerator
from spiralgalaxy.model.parameters import GalaxyParameters
from spiralgalaxy.model.random_source import NumpyRandomSource


@pytest.fixture
def controller(rng):
    return RegenerationController(GalaxyContext(rng=rng))


@pytest.fixture
def params():
    return GalaxyParameters(count=500)


def test_starts_idle_without_buffer(controller):
    assert controller.state == GenerationState.IDLE
    assert controller.current_buffer() is None


def test_commit_installs_buffer(controller, params):
    buffer = controller.commit(params)

    assert controller.current_buffer() is buffer
    assert controller.context.parameters == params
    assert controller.state == GenerationState.IDLE


def test_commit_releases_previous_buffer(controller, params):
    first = controller.commit(params)
    second = controller.commit(params.replace(count=800))

    assert first.is_released
    assert not second.is_released
    assert controller.current_buffer() is second


def test_invalid_commit_keeps_previous_buffer(controller, params):
    installed = controller.commit(params)

    with pytest.raises(InvalidParameterError):
        controller.commit(params.replace(count=0))

    assert controller.current_buffer() is installed
    assert not installed.is_released
    assert controller.context.parameters == params
    assert controller.state == GenerationState.IDLE


def test_invalid_commit_without_previous_buffer(controller):
    with pytest.raises(InvalidParameterError):
        controller.commit(GalaxyParameters(branches=0))
    assert controller.current_buffer() is None


def test_resource_exhaustion_keeps_previous_buffer(controller, params, exhausted_rng):
    installed = controller.commit(params)
    controller.context.rng = exhausted_rng

    with pytest.raises(ResourceExhaustionError):
        controller.commit(params)

    assert controller.current_buffer() is installed
    assert not installed.is_released
    assert controller.state == GenerationState.IDLE


def test_request_enters_generating(controller, params):
    ticket = controller.request(params)
    assert controller.state == GenerationState.GENERATING
    assert ticket == controller.latest_ticket


def test_rejected_request_opens_no_ticket(controller):
    with pytest.raises(InvalidParameterError):
        controller.request(GalaxyParameters(radius=0.0))
    assert controller.latest_ticket == 0
    assert controller.state == GenerationState.IDLE


def test_only_latest_ticket_is_installed(controller, params):
    gen = PointFieldGenerator()
    t1 = controller.request(params)
    t2 = controller.request(params.replace(count=700))

    stale = gen.generate(params, NumpyRandomSource(1))
    fresh = gen.generate(params.replace(count=700), NumpyRandomSource(2))

    assert controller.install(t1, stale) is False
    assert stale.is_released
    assert controller.current_buffer() is None
    assert controller.state == GenerationState.GENERATING

    assert controller.install(t2, fresh) is True
    assert controller.current_buffer() is fresh
    assert controller.context.parameters.count == 700
    assert controller.state == GenerationState.IDLE


def test_late_stale_result_does_not_replace_newer(controller, params):
    gen = PointFieldGenerator()
    t1 = controller.request(params)
    t2 = controller.request(params)

    newer = gen.generate(params, NumpyRandomSource(3))
    controller.install(t2, newer)
    older = gen.generate(params, NumpyRandomSource(4))

    assert controller.install(t1, older) is False
    assert controller.current_buffer() is newer
    assert not newer.is_released


def test_sync_commit_supersedes_pending_request(controller, params):
    pending = controller.request(params)
    committed = controller.commit(params.replace(count=600))

    late = PointFieldGenerator().generate(params, NumpyRandomSource(5))
    assert controller.install(pending, late) is False
    assert controller.current_buffer() is committed


def test_fail_reports_only_latest(controller, params):
    t1 = controller.request(params)
    t2 = controller.request(params)

    assert controller.fail(t1, RuntimeError("boom")) is False
    assert controller.fail(t2, RuntimeError("boom")) is True
    assert controller.state == GenerationState.IDLE


def test_install_listener_sees_consistent_state(controller, params):
    first = controller.commit(params)
    seen = []

    def listener(buffer, installed_params):
        current = controller.current_buffer()
        seen.append((
            current is buffer,
            current.positions.shape == current.colors.shape,
            first.is_released,
            installed_params.count,
        ))

    controller.add_install_listener(listener)
    controller.commit(params.replace(count=900))

    assert seen == [(True, True, True, 900)]


def test_listener_not_called_on_failure(controller, params):
    calls = []
    controller.add_install_listener(lambda *args: calls.append(args))
    with pytest.raises(InvalidParameterError):
        controller.commit(params.replace(count=-1))
    assert calls == []


def test_close_releases_buffer(controller, params):
    buffer = controller.commit(params)
    controller.close()
    controller.close()
    assert buffer.is_released
    assert controller.current_buffer() is None


def test_default_context_is_usable():
    controller = RegenerationController()
    buffer = controller.commit(GalaxyParameters(count=100))
    assert buffer.count == 100


def test_latest_parameters_follow_the_newest_request(controller, params):
    controller.commit(params)
    assert controller.latest_parameters() == params

    pending = controller.request(params.replace(count=900))
    assert controller.latest_parameters().count == 900
    assert controller.context.parameters.count == 500

    controller.fail(pending, RuntimeError("lost"))
    assert controller.latest_parameters() == params
