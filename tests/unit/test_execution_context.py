"""Tests for ExecutionContext and message recording."""

import pytest
from datetime import timedelta
from uuid import uuid4

from neo_identity.core.exceptions import InvalidArgumentError
from neo_identity.core.shared import ExecutionContext, FixedClock, MessageLevel


class TestExecutionContextCreation:
    """Construction and argument checks."""

    def test_create_stamps_timestamp_from_clock(self, tenant_info, clock, fixed_now):
        ctx = ExecutionContext.create(tenant_info, "alice", "api", "LOGIN", clock)

        assert ctx.timestamp == fixed_now
        assert ctx.tenant_info == tenant_info
        assert ctx.correlation_id is not None
        assert ctx.minimum_message_level == MessageLevel.INFORMATION

    def test_timestamp_is_fixed_for_the_operation(self, tenant_info, clock, fixed_now):
        ctx = ExecutionContext.create(tenant_info, "alice", "api", "LOGIN", clock)
        clock.advance(timedelta(minutes=5))

        assert ctx.timestamp == fixed_now

    def test_explicit_correlation_id_is_kept(self, tenant_info, clock):
        correlation_id = uuid4()
        ctx = ExecutionContext.create(tenant_info, "alice", "api", "LOGIN", clock, correlation_id=correlation_id)

        assert ctx.correlation_id == correlation_id

    @pytest.mark.parametrize("user,origin,operation", [
        ("", "api", "LOGIN"),
        ("   ", "api", "LOGIN"),
        ("alice", "", "LOGIN"),
        ("alice", "api", " "),
        (None, "api", "LOGIN"),
    ])
    def test_blank_identity_fields_rejected(self, tenant_info, clock, user, origin, operation):
        with pytest.raises(InvalidArgumentError):
            ExecutionContext.create(tenant_info, user, origin, operation, clock)

    def test_missing_clock_rejected(self, tenant_info):
        with pytest.raises(InvalidArgumentError):
            ExecutionContext.create(tenant_info, "alice", "api", "LOGIN", None)

    def test_missing_tenant_rejected(self, clock):
        with pytest.raises(InvalidArgumentError):
            ExecutionContext.create(None, "alice", "api", "LOGIN", clock)


class TestMessageRecording:
    """Message filtering and outcome flags."""

    @pytest.fixture
    def ctx(self, tenant_info, clock):
        return ExecutionContext.create(
            tenant_info, "alice", "api", "LOGIN", clock, minimum_message_level=MessageLevel.WARNING
        )

    def test_messages_below_minimum_level_are_dropped(self, ctx):
        assert ctx.add_information_message("Login.Started") is None
        assert ctx.add_debug_message("Login.Debug") is None
        assert not ctx.has_messages

    def test_messages_at_or_above_minimum_level_are_kept(self, ctx):
        message = ctx.add_warning_message("Login.Slow", "took 3s")

        assert message is not None
        assert message.level == MessageLevel.WARNING
        assert message.text == "took 3s"
        assert ctx.messages == (message,)

    def test_error_critical_and_success_always_recorded(self, tenant_info, clock):
        ctx = ExecutionContext.create(
            tenant_info, "alice", "api", "LOGIN", clock, minimum_message_level=MessageLevel.SUCCESS
        )
        ctx.add_error_message("A")
        ctx.add_critical_message("B")
        ctx.add_success_message("C")
        ctx.add_warning_message("D")

        assert [m.code for m in ctx.messages] == ["A", "B", "C"]

    def test_messages_keep_insertion_order(self, ctx):
        ctx.add_error_message("First")
        ctx.add_warning_message("Second")
        ctx.add_error_message("Third")

        assert [m.code for m in ctx.messages] == ["First", "Second", "Third"]

    def test_get_messages_by_level(self, ctx):
        ctx.add_error_message("E1")
        ctx.add_warning_message("W1")

        assert [m.code for m in ctx.get_messages(MessageLevel.ERROR)] == ["E1"]
        assert len(ctx.get_messages()) == 2
        assert ctx.has_message_code("W1")
        assert not ctx.has_message_code("W2")

    def test_successful_without_errors(self, ctx):
        ctx.add_warning_message("Login.Slow")

        assert ctx.is_successful
        assert not ctx.is_faulted
        assert not ctx.has_error_messages

    def test_faulted_on_error_message(self, ctx):
        ctx.add_error_message("Login.Failed")

        assert ctx.has_error_messages
        assert ctx.is_faulted
        assert not ctx.is_successful

    def test_faulted_on_exception(self, ctx):
        ctx.add_exception(RuntimeError("boom"))

        assert ctx.has_exceptions
        assert ctx.is_faulted
        assert len(ctx.exceptions) == 1

    def test_partially_successful(self, ctx):
        ctx.add_success_message("Token.Issued")
        ctx.add_error_message("Audit.Failed")

        assert ctx.is_partially_successful

    def test_add_exception_requires_instance(self, ctx):
        with pytest.raises(InvalidArgumentError):
            ctx.add_exception(None)

    def test_message_timestamp_comes_from_clock(self, ctx, clock):
        later = clock.advance(timedelta(seconds=30))
        message = ctx.add_error_message("Login.Failed")

        assert message.timestamp == later


class TestMessageMutation:
    """Changing recorded messages in place."""

    def test_change_message_text(self, execution_context):
        message = execution_context.add_error_message("Code", "old")

        assert execution_context.change_message_text(message.id, "new")
        assert execution_context.messages[0].text == "new"
        assert execution_context.messages[0].id == message.id

    def test_change_unknown_message_returns_false(self, execution_context):
        assert not execution_context.change_message_text(uuid4(), "new")
        assert not execution_context.change_message_level(uuid4(), MessageLevel.ERROR)

    def test_change_message_level(self, execution_context):
        message = execution_context.add_warning_message("Code")

        assert execution_context.change_message_level(message.id, MessageLevel.ERROR)
        assert execution_context.has_error_messages

    def test_change_messages_level_bulk(self, execution_context):
        execution_context.add_error_message("A")
        execution_context.add_error_message("B")
        execution_context.add_warning_message("C")

        assert execution_context.change_messages_level(MessageLevel.ERROR, MessageLevel.WARNING)
        assert not execution_context.has_error_messages
        assert len(execution_context.get_messages(MessageLevel.WARNING)) == 3

    def test_change_messages_level_without_match(self, execution_context):
        assert not execution_context.change_messages_level(MessageLevel.CRITICAL, MessageLevel.ERROR)

    def test_change_business_operation_code(self, execution_context):
        execution_context.change_business_operation_code("ROTATE_TOKEN")

        assert execution_context.business_operation_code == "ROTATE_TOKEN"

    def test_change_business_operation_code_rejects_blank(self, execution_context):
        with pytest.raises(InvalidArgumentError):
            execution_context.change_business_operation_code("  ")


class TestCloneAndImport:
    """Independent copies and merging."""

    def test_clone_has_independent_messages(self, execution_context):
        execution_context.add_error_message("Before")
        cloned = execution_context.clone()
        cloned.add_error_message("After")

        assert [m.code for m in execution_context.messages] == ["Before"]
        assert [m.code for m in cloned.messages] == ["Before", "After"]
        assert cloned.timestamp == execution_context.timestamp
        assert cloned.correlation_id == execution_context.correlation_id

    def test_import_from_merges_messages_and_exceptions(self, execution_context):
        child = execution_context.clone()
        child.add_error_message("Child.Failed")
        child.add_exception(ValueError("bad"))

        execution_context.import_from(child)

        assert execution_context.has_message_code("Child.Failed")
        assert len(execution_context.exceptions) == 1

    def test_import_from_does_not_duplicate_shared_messages(self, execution_context):
        execution_context.add_error_message("Shared")
        child = execution_context.clone()

        execution_context.import_from(child)

        assert len(execution_context.messages) == 1

    def test_to_dict(self, execution_context, tenant_info):
        data = execution_context.to_dict()

        assert data["tenant_code"] == str(tenant_info.code)
        assert data["execution_user"] == "alice@acme.test"
        assert data["business_operation_code"] == "RESET_PASSWORD"


class TestFixedClock:

    def test_naive_datetime_treated_as_utc(self, fixed_now):
        clock = FixedClock(fixed_now.replace(tzinfo=None))

        assert clock.utc_now() == fixed_now

    def test_advance(self, clock, fixed_now):
        assert clock.advance(timedelta(hours=1)) == fixed_now + timedelta(hours=1)
