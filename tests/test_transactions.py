import unittest
from unittest import mock

from sqlalchemy.exc import IntegrityError, OperationalError

from rendezvous import config
from rendezvous.errors import AlreadyLiked, InternalInconsistency
from rendezvous.shared.transactions import run_in_transaction


class TestRunInTransaction(unittest.TestCase):
    def setUp(self):
        self.db = mock.MagicMock()

    def test_commits_result(self):
        self.assertEqual(run_in_transaction(self.db, lambda: 42, "answer"), 42)
        self.db.commit.assert_called_once()
        self.db.rollback.assert_not_called()

    def test_retries_write_conflicts(self):
        operation = mock.Mock(
            side_effect=[IntegrityError("INSERT", {}, Exception("duplicate key")), "ok"]
        )

        self.assertEqual(run_in_transaction(self.db, operation, "like"), "ok")
        self.assertEqual(operation.call_count, 2)
        self.db.rollback.assert_called_once()

    def test_gives_up_with_internal_inconsistency(self):
        operation = mock.Mock(side_effect=OperationalError("UPDATE", {}, Exception("deadlock")))

        with self.assertRaises(InternalInconsistency):
            run_in_transaction(self.db, operation, "like")
        self.assertEqual(operation.call_count, config.MATCH_TX_MAX_RETRIES)
        self.db.commit.assert_not_called()

    def test_domain_errors_are_not_retried(self):
        operation = mock.Mock(side_effect=AlreadyLiked())

        with self.assertRaises(AlreadyLiked):
            run_in_transaction(self.db, operation, "like")
        operation.assert_called_once()
        self.db.rollback.assert_called_once()
