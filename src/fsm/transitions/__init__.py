"""
Exports públicos do módulo fsm/transitions.

Sucessores fixos das cadeias de texto livre.
"""

from fsm.transitions.rules import (
    TEXT_CHAINS,
    TEXT_SUCCESSORS,
    TextChain,
    chain_for_step,
    get_text_successor,
    validate_text_chains,
)

__all__ = [
    "TEXT_CHAINS",
    "TEXT_SUCCESSORS",
    "TextChain",
    "chain_for_step",
    "get_text_successor",
    "validate_text_chains",
]
