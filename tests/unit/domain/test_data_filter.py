"""Tests for SoftDeleteFilter and FilterScope."""

from repokit.domain.services import FilterScope, SoftDeleteFilter


def test_filter_enabled_by_default():
    assert SoftDeleteFilter().is_enabled is True


def test_disable_returns_scope():
    assert isinstance(SoftDeleteFilter().disable(), FilterScope)


def test_disable_scope_restores_on_exit():
    data_filter = SoftDeleteFilter()
    with data_filter.disable():
        assert data_filter.is_enabled is False
    assert data_filter.is_enabled is True


def test_nested_disable_restores_original_state():
    data_filter = SoftDeleteFilter()
    outer = data_filter.disable()
    inner = data_filter.disable()
    inner.release()
    assert data_filter.is_enabled is False
    outer.release()
    assert data_filter.is_enabled is True


def test_out_of_order_release_restores_original_state():
    data_filter = SoftDeleteFilter()
    outer = data_filter.disable()
    inner = data_filter.disable()
    outer.release()
    assert data_filter.is_enabled is False
    inner.release()
    assert data_filter.is_enabled is True


def test_releasing_earlier_scope_keeps_later_scope_in_force():
    data_filter = SoftDeleteFilter()
    disabled = data_filter.disable()
    enabled = data_filter.enable()
    disabled.release()
    assert data_filter.is_enabled is True
    enabled.release()
    assert data_filter.is_enabled is True


def test_inner_release_keeps_filter_disabled_when_already_disabled():
    data_filter = SoftDeleteFilter(enabled=False)
    with data_filter.disable():
        assert data_filter.is_enabled is False
    assert data_filter.is_enabled is False


def test_enable_inside_disable_restores_disabled():
    data_filter = SoftDeleteFilter()
    with data_filter.disable():
        with data_filter.enable():
            assert data_filter.is_enabled is True
        assert data_filter.is_enabled is False
    assert data_filter.is_enabled is True


def test_release_is_idempotent():
    data_filter = SoftDeleteFilter()
    outer = data_filter.disable()
    inner = data_filter.disable()
    inner.release()
    outer.release()
    inner.release()
    assert data_filter.is_enabled is True
    assert inner.released is True


def test_scope_restores_on_exception():
    data_filter = SoftDeleteFilter()
    try:
        with data_filter.disable():
            raise RuntimeError
    except RuntimeError:
        pass
    assert data_filter.is_enabled is True


def test_filters_are_independent():
    first, second = SoftDeleteFilter(), SoftDeleteFilter()
    first.disable()
    assert second.is_enabled is True
