from core.schemas import USER, Conversation, HistoryResult


def build_conversation(history: HistoryResult, message: str) -> Conversation:
    """
    History matches in their returned order, then the current user turn.

    The current turn is always the last element.
    """

    conversation = [match.to_message() for match in history.matches]
    conversation.append({"role": USER, "content": message})
    return conversation
