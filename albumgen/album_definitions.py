# Display titles and descriptions for albums known ahead of time.  Albums
# missing from this table are synced with their slug capitalized as the
# title and an empty description.

KNOWN_ALBUMS = {
    # 'slug': {'title': ..., 'description': ...},
    'doors': {
        'title': 'Doors & Windows',
        'description': 'Unique doors and windows from around the world.',
    },
    'macro': {
        'title': 'Macro',
        'description': 'Get closer to the world around you.',
    },
    'minimal': {
        'title': 'Minimal',
        'description': 'Less is the new more',
    },
    'nature': {
        'title': 'Nature',
        'description': 'Indeed the most beautiful mother nature',
    },
    'patterns': {
        'title': 'Patterns',
        'description': 'They are everywhere, just look around',
    },
}
