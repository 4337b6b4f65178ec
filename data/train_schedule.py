# Published high-speed timetable (Uzbekistan Railways)
# One entry per direction; entries are (departure, arrival, note) in local time.
# Ordered by train type, then direction, which is the order the schedule
# page shows them in. Arrival earlier than departure means next day.

TRAIN_SCHEDULE = [
    # ── Afrosiyob ────────────────────────────────────────────────
    {
        "train_type": "Afrosiyob",
        "route": {"en": "Tashkent → Samarkand", "ru": "Ташкент → Самарканд"},
        "entries": [
            ("06:10", "08:23", "Fri-Sun"),
            ("06:33", "08:46", None),
            ("07:30", "09:43", None),
            ("08:00", "10:25", None),
            ("08:30", "10:49", None),
            ("19:48", "22:13", None)
        ]
    },
    {
        "train_type": "Afrosiyob",
        "route": {"en": "Samarkand → Tashkent", "ru": "Самарканд → Ташкент"},
        "entries": [
            ("05:21", "07:42", None),
            ("16:56", "19:17", None),
            ("17:40", "20:07", None),
            ("18:15", "20:30", None),
            ("18:49", "21:04", None),
            ("20:01", "22:16", "Fri-Sun")
        ]
    },
    {
        "train_type": "Afrosiyob",
        "route": {"en": "Tashkent → Bukhara", "ru": "Ташкент → Бухара"},
        "entries": [
            ("06:10", "10:16", "Fri-Sun"),
            ("07:30", "11:42", None),
            ("08:30", "12:42", None),
            ("19:48", "00:06", None)
        ]
    },
    {
        "train_type": "Afrosiyob",
        "route": {"en": "Bukhara → Tashkent", "ru": "Бухара → Ташкент"},
        "entries": [
            ("03:27", "07:42", None),
            ("15:03", "19:17", None),
            ("16:16", "20:30", None),
            ("18:08", "22:16", "Fri-Sun")
        ]
    },
    {
        "train_type": "Afrosiyob",
        "route": {"en": "Samarkand → Bukhara", "ru": "Самарканд → Бухара"},
        "entries": [
            ("08:33", "10:16", "Fri-Sun"),
            ("09:53", "11:42", None),
            ("10:59", "12:42", None),
            ("22:23", "00:06", None)
        ]
    },
    {
        "train_type": "Afrosiyob",
        "route": {"en": "Bukhara → Samarkand", "ru": "Бухара → Самарканд"},
        "entries": [
            ("03:27", "05:11", None),
            ("15:03", "16:46", None),
            ("16:16", "18:05", None),
            ("18:08", "19:51", "Fri-Sun")
        ]
    },
    # ── Sharq ────────────────────────────────────────────────────
    {
        "train_type": "Sharq",
        "route": {"en": "Tashkent → Samarkand", "ru": "Ташкент → Самарканд"},
        "entries": [
            ("08:37", "11:42", None),
            ("20:32", "23:41", None)
        ]
    },
    {
        "train_type": "Sharq",
        "route": {"en": "Samarkand → Tashkent", "ru": "Самарканд → Ташкент"},
        "entries": [
            ("08:06", "12:01", None),
            ("19:23", "23:06", None)
        ]
    },
    {
        "train_type": "Sharq",
        "route": {"en": "Tashkent → Bukhara", "ru": "Ташкент → Бухара"},
        "entries": [
            ("08:37", "14:18", None),
            ("20:32", "02:29", None)
        ]
    },
    {
        "train_type": "Sharq",
        "route": {"en": "Bukhara → Tashkent", "ru": "Бухара → Ташкент"},
        "entries": [
            ("05:17", "12:01", None),
            ("16:51", "23:06", None)
        ]
    },
    {
        "train_type": "Sharq",
        "route": {"en": "Samarkand → Bukhara", "ru": "Самарканд → Бухара"},
        "entries": [
            ("00:01", "02:29", None),
            ("11:56", "14:12", None)
        ]
    },
    {
        "train_type": "Sharq",
        "route": {"en": "Bukhara → Samarkand", "ru": "Бухара → Самарканд"},
        "entries": [
            ("05:17", "07:38", None),
            ("16:51", "19:13", None)
        ]
    }
]
