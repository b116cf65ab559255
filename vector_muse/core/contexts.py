"""
Sentence builders for the word-in-context explorer and context morphing.
"""

from typing import Iterable

import config


def sentences_for_word(
    word: str,
    contexts: Iterable[str],
    placeholder: str = config.WORD_PLACEHOLDER
) -> list[str]:
    """
    Substitute a word into every context template that has the placeholder.

    Templates without the placeholder and blank lines are skipped.
    """
    word = word.strip()
    if not word:
        raise ValueError("Please enter a word to explore")

    sentences = [
        context.strip().replace(placeholder, word)
        for context in contexts
        if context.strip() and placeholder in context
    ]
    if not sentences:
        raise ValueError(f"Provide at least one context with the {placeholder} placeholder")
    return sentences


def short_label(index: int, sentence: str, width: int = 20) -> str:
    """Plot label like '3: The artist expresse...'."""
    suffix = "..." if len(sentence) > width else ""
    return f"{index + 1}: {sentence[:width]}{suffix}"


def generate_sentence_variations(
    sentence: str,
    target_word: str,
    adjectives: list[str] = config.ADJECTIVE_SWAPS,
    verbs: list[str] = config.VERB_SWAPS,
    max_variations: int = config.MAX_VARIATIONS,
) -> list[str]:
    """
    Vary the context around a target word while keeping the word itself.

    The original sentence comes first. Then the word right before the target
    is swapped for adjectives (up to 5 sentences in total), words one to three
    before the target are swapped for verbs, and when that still yields fewer
    than 5 sentences, verb and adjective are swapped together.

    Raises:
        ValueError: If the target word does not occur in the sentence
    """
    target_word = target_word.strip()
    if not sentence.strip():
        raise ValueError("Please enter a sentence")
    if not target_word or target_word not in sentence:
        raise ValueError("Target word must be present in the sentence")

    words = sentence.split()
    target_index = next((i for i, w in enumerate(words) if target_word in w), -1)
    if target_index == -1:
        raise ValueError("Target word not found in sentence")

    variations = [" ".join(words)]

    def swapped(replacements: dict[int, str]) -> str:
        # Keys count back from the target word
        new_words = list(words)
        for back, replacement in replacements.items():
            new_words[target_index - back] = replacement
        return " ".join(new_words)

    if target_index > 0:
        for adj in adjectives:
            if len(variations) >= config.MAX_ADJECTIVE_VARIATIONS:
                break
            if adj != words[target_index - 1]:
                variations.append(swapped({1: adj}))

    if target_index > 1:
        for back in range(1, min(3, target_index) + 1):
            for verb in verbs:
                if len(variations) >= max_variations:
                    break
                if verb != words[target_index - back]:
                    variations.append(swapped({back: verb}))

    if len(variations) < config.MAX_ADJECTIVE_VARIATIONS and target_index > 1:
        for verb in verbs:
            for adj in adjectives:
                if len(variations) >= max_variations:
                    break
                if verb != words[target_index - 2] and adj != words[target_index - 1]:
                    variations.append(swapped({2: verb, 1: adj}))

    return variations[:max_variations]
