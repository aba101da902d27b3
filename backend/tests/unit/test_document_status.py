"""Unit tests for DocumentStatus state machine"""

import pytest

from domain.documents import (
    ALLOWED_TRANSITIONS,
    DocumentStatus,
    StateTransitionError,
    can_transition,
    get_allowed_transitions,
    validate_transition,
)
from domain.documents.document_status import REVIEW_DECISIONS


class TestDocumentStatusStateMachine:
    """Test DocumentStatus enum and state transition validation"""

    def test_document_status_enum_values(self):
        assert DocumentStatus.PENDING.value == "PENDING"
        assert DocumentStatus.APPROVED.value == "APPROVED"
        assert DocumentStatus.REJECTED.value == "REJECTED"
        assert len(DocumentStatus) == 3

    def test_new_documents_start_pending(self):
        assert can_transition(None, DocumentStatus.PENDING) is True
        assert can_transition(None, DocumentStatus.APPROVED) is False
        assert can_transition(None, DocumentStatus.REJECTED) is False

    @pytest.mark.parametrize("decision", [DocumentStatus.APPROVED, DocumentStatus.REJECTED])
    def test_pending_can_be_reviewed(self, decision):
        assert can_transition(DocumentStatus.PENDING, decision) is True

    @pytest.mark.parametrize("terminal", [DocumentStatus.APPROVED, DocumentStatus.REJECTED])
    @pytest.mark.parametrize("target", list(DocumentStatus))
    def test_reviewed_documents_are_terminal(self, terminal, target):
        """A reviewed document only goes away through re-upload or delete"""
        assert can_transition(terminal, target) is False

    def test_pending_cannot_return_to_pending(self):
        assert can_transition(DocumentStatus.PENDING, DocumentStatus.PENDING) is False

    def test_review_decisions(self):
        assert set(REVIEW_DECISIONS) == {DocumentStatus.APPROVED, DocumentStatus.REJECTED}

    def test_all_states_have_transition_rules(self):
        for status in DocumentStatus:
            assert status in ALLOWED_TRANSITIONS
        assert None in ALLOWED_TRANSITIONS

    def test_get_allowed_transitions(self):
        assert get_allowed_transitions(DocumentStatus.PENDING) == [
            DocumentStatus.APPROVED,
            DocumentStatus.REJECTED,
        ]
        assert get_allowed_transitions(DocumentStatus.APPROVED) == []


class TestValidateTransition:

    def test_valid_transition_passes(self):
        validate_transition(DocumentStatus.PENDING, DocumentStatus.REJECTED)

    def test_invalid_transition_raises(self):
        with pytest.raises(StateTransitionError) as exc_info:
            validate_transition(DocumentStatus.APPROVED, DocumentStatus.REJECTED)
        assert "APPROVED -> REJECTED" in str(exc_info.value)

    def test_invalid_initial_transition_names_new(self):
        with pytest.raises(StateTransitionError, match="NEW -> APPROVED"):
            validate_transition(None, DocumentStatus.APPROVED)
