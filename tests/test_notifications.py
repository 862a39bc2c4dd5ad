"""
Tests for event delivery: emitted after commit, sink failures never leak.
"""

import logging

from splitledger.core.utils import parse_units
from splitledger.db.memory import InMemoryStorage
from splitledger.schemas.events import DebtSettled, ExpenseAdded, GroupCreated, UserJoinedGroup
from splitledger.services.ledger import Ledger
from splitledger.services.notification_services import LoggingNotificationSink, NotificationSink
from splitledger.services.payment_services import TokenPaymentGateway, TokenWallet

ALICE, BOB = "alice", "bob"


class BrokenSink(NotificationSink):
    def emit(self, event):
        raise RuntimeError("sink is down")


def test_events_in_order(ledger, events, run):
    group_id = run(ledger.create_group(ALICE))
    run(ledger.join_group(group_id, BOB))
    run(ledger.add_expense_equally(group_id, ALICE, "x", 10, [BOB]))

    assert [type(e) for e in events.events] == [GroupCreated, UserJoinedGroup, ExpenseAdded]
    created = events.events[0]
    assert (created.group_id, created.owner, created.members) == (group_id, ALICE, [ALICE])
    assert events.of_type(UserJoinedGroup)[0].user == BOB


def test_sink_failure_does_not_undo_the_write(run, caplog):
    ledger = Ledger(InMemoryStorage(), TokenPaymentGateway(TokenWallet(), "ledger"), BrokenSink())

    with caplog.at_level(logging.WARNING, logger="splitledger.ledger"):
        group_id = run(ledger.create_group(ALICE, [BOB]))
        run(ledger.add_expense_equally(group_id, ALICE, "x", 10, [BOB]))

    assert run(ledger.get_balance(group_id, BOB)) == -10
    assert "Notification sink failed" in caplog.text


def test_logging_sink_renders_units(caplog):
    sink = LoggingNotificationSink()

    with caplog.at_level(logging.INFO, logger="splitledger.events"):
        sink.emit(DebtSettled(group_id=3, debtor=BOB, creditor=ALICE, amount=parse_units("12.5")))

    assert "DebtSettled group=3" in caplog.text
    assert "'amount': '12.5'" in caplog.text
