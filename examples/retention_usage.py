"""
Conversation retention example for chat_retention.

This example demonstrates how a chat service decides whether a transcript
needs pruning, which configuration to use, and what survives.
"""

from datetime import datetime, timedelta, timezone

from chat_retention import (
    ConversationPruner,
    Message,
    MessageRole,
    PruningConfig,
    RetentionManager,
    conversation_stats,
    select_config,
)
from chat_retention.policy import recommended_config


def create_sample_transcript():
    """Create a two-day CRM assistant conversation."""
    now = datetime.now(timezone.utc)
    start = now - timedelta(hours=40)

    messages = []
    for i in range(70):
        timestamp = start + timedelta(minutes=35 * i)
        if i % 2 == 0:
            messages.append(
                Message(
                    role=MessageRole.USER,
                    content=f"Can you pull up the notes for account #{i}? " * 4,
                    timestamp=timestamp,
                )
            )
        else:
            messages.append(
                Message(
                    role=MessageRole.ASSISTANT,
                    content=f"Here is a summary of account #{i - 1}. " * 6,
                    timestamp=timestamp,
                )
            )

    messages[9] = Message(
        role=MessageRole.ASSISTANT,
        content="Contact Ada Lovelace created and linked to Analytical Engines Ltd.",
        timestamp=messages[9].timestamp,
        action="contact_created",
    )
    return messages


def demonstrate_stats():
    """Demonstrate the pruning trigger."""
    print("=== Conversation Stats ===\n")

    messages = create_sample_transcript()
    stats = conversation_stats(messages)

    for key, value in stats.to_dict().items():
        print(f"{key}: {value}")
    print()


def demonstrate_policy_selection():
    """Demonstrate the two selection tables."""
    print("=== Policy Selection ===\n")

    messages = create_sample_transcript()
    print(f"Adaptive:    {select_config(messages)}")
    print(f"Recommended: {recommended_config(messages)}")
    print()


def demonstrate_pruning():
    """Demonstrate reference and chronological token trimming."""
    print("=== Pruning Engine ===\n")

    messages = create_sample_transcript()
    pruner = ConversationPruner()
    config = PruningConfig(
        max_messages=40,
        max_tokens=1500,
        max_age_hours=36,
        preserve_important=True,
        preserve_last_n=6,
    )

    analysis = pruner.analyze_pruning_impact(messages, config)
    print(f"Removed by age:    {analysis['removed_by_age']}")
    print(f"Removed by count:  {analysis['removed_by_count']}")
    print(f"Removed by tokens: {analysis['removed_by_tokens']}")
    print()

    for name, result in [
        ("Reference order", pruner.prune(messages, config)),
        ("Chronological order", pruner.prune_chronological(messages, config)),
    ]:
        print(f"--- {name} ---")
        print(f"Original messages: {result.original_count}")
        print(f"Remaining messages: {result.remaining_count}")
        print(f"Pruning ratio: {result.pruning_ratio:.2%}")
        print(f"Token reduction: {result.token_reduction_ratio:.2%}")
        print(f"Reason: {result.reason}")
        for message in result.messages[:3]:
            print(f"  - [{message.role_name}] {message.content[:60]}")
        print()


def demonstrate_manager():
    """Demonstrate the host flow on a JSON payload."""
    print("=== Retention Manager ===\n")

    manager = RetentionManager()
    payload = [
        {"role": "user", "content": f"Question {i}", "timestamp": "2026-01-01T09:00:00Z"}
        for i in range(55)
    ]

    data = manager.retain_payload(payload)
    print(f"Remaining: {data['remainingCount']} of {data['originalCount']}")
    print(f"Reason: {data['reason']}")
    print()


if __name__ == "__main__":
    print("Running conversation retention examples...\n")
    demonstrate_stats()
    demonstrate_policy_selection()
    demonstrate_pruning()
    demonstrate_manager()
    print("Examples completed!")
