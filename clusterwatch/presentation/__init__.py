from .cards import HostCard, build_card, build_cards

__all__ = [
    'HostCard',
    'build_card',
    'build_cards'
]
