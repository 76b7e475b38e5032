"""Tests for conversation structures and answer recovery."""

from rivet.conversation import (
    AGENT_TURN,
    ASSISTANT_MESSAGE,
    USER_TURN,
    ConversationTurn,
    Step,
    StepMessage,
    describe_conversation,
    extract_json,
    extract_last_assistant_message,
)


def agent_turn(*texts, kind=ASSISTANT_MESSAGE):
    return ConversationTurn(
        kind=AGENT_TURN,
        steps=tuple(Step(kind=kind, message=StepMessage(text=t)) for t in texts),
    )


class TestExtractLastAssistantMessage:
    """Test the reverse scan for the newest assistant text."""

    def test_single_message(self):
        assert extract_last_assistant_message([agent_turn("Add login")]) == "Add login"

    def test_newest_turn_wins(self):
        conversation = [agent_turn("old"), ConversationTurn(USER_TURN, ()), agent_turn("new")]
        assert extract_last_assistant_message(conversation) == "new"

    def test_newest_step_wins(self):
        assert extract_last_assistant_message([agent_turn("first", "second")]) == "second"

    def test_skips_blank_messages(self):
        conversation = [agent_turn("real answer"), agent_turn("   ")]
        assert extract_last_assistant_message(conversation) == "real answer"

    def test_text_is_trimmed(self):
        assert extract_last_assistant_message([agent_turn("  fix: typo \n")]) == "fix: typo"

    def test_ignores_non_assistant_steps(self):
        conversation = [agent_turn("tool output", kind="toolCall")]
        assert extract_last_assistant_message(conversation) is None

    def test_ignores_user_turns(self):
        turn = ConversationTurn(
            kind=USER_TURN,
            steps=(Step(ASSISTANT_MESSAGE, StepMessage("not from agent")),),
        )
        assert extract_last_assistant_message([turn]) is None

    def test_missing_levels(self):
        conversation = [
            None,
            ConversationTurn(kind=AGENT_TURN, steps=None),
            ConversationTurn(kind=AGENT_TURN, steps=(Step(ASSISTANT_MESSAGE, None),)),
            ConversationTurn(kind=AGENT_TURN, steps=(Step(ASSISTANT_MESSAGE, StepMessage(None)),)),
        ]
        assert extract_last_assistant_message(conversation) is None

    def test_empty_and_none(self):
        assert extract_last_assistant_message([]) is None
        assert extract_last_assistant_message(None) is None


class TestFromDict:
    """Test building turns from SDK-style mappings."""

    def test_agent_turn(self):
        turn = ConversationTurn.from_dict({
            'type': AGENT_TURN,
            'turn': {'steps': [
                {'type': 'toolCall'},
                {'type': ASSISTANT_MESSAGE, 'message': {'text': 'Refactor auth flow'}},
            ]},
        })
        assert turn.steps_count == 2
        assert extract_last_assistant_message([turn]) == "Refactor auth flow"

    def test_missing_turn_body(self):
        turn = ConversationTurn.from_dict({'type': AGENT_TURN})
        assert turn.steps is None
        assert turn.steps_count == 0

    def test_non_string_text(self):
        step = Step.from_dict({'type': ASSISTANT_MESSAGE, 'message': {'text': 42}})
        assert step.text is None

    def test_not_a_mapping(self):
        assert ConversationTurn.from_dict(None) is None
        assert Step.from_dict("oops") is None


class TestDescribeConversation:
    """Test the diagnostic summary."""

    def test_counts_agent_steps_only(self):
        conversation = [
            ConversationTurn(USER_TURN, (Step("userMessage"),)),
            agent_turn("a", "b"),
            ConversationTurn(AGENT_TURN, None),
        ]
        assert describe_conversation(conversation) == [
            {'type': USER_TURN, 'steps_count': 0},
            {'type': AGENT_TURN, 'steps_count': 2},
            {'type': AGENT_TURN, 'steps_count': 0},
        ]

    def test_empty(self):
        assert describe_conversation(None) == []


class TestExtractJson:
    """Test JSON recovery from model output."""

    def test_fenced_block(self):
        text = 'Here you go:\n```json\n{"title": "T", "body": "B"}\n```\nThanks'
        assert extract_json(text) == '{"title": "T", "body": "B"}'

    def test_fence_without_language(self):
        assert extract_json('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_fence_language_case_insensitive(self):
        assert extract_json('```JSON\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_object_in_prose(self):
        text = 'Sure! {"title": "T", "body": "B"} Hope that helps.'
        assert extract_json(text) == '{"title": "T", "body": "B"}'

    def test_nested_braces_use_outermost_span(self):
        text = 'x {"a": {"b": 1}} y'
        assert extract_json(text) == '{"a": {"b": 1}}'

    def test_no_object_returns_input(self):
        assert extract_json("no json here") == "no json here"

    def test_empty(self):
        assert extract_json("") == ""

    def test_closing_before_opening(self):
        assert extract_json("} then {") == "} then {"
