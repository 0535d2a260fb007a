# astrology.py
# ======================
# Zodiac sign lookup for a birth day/month
# Twelve fixed day/month ranges, one wrapping December into January

ZODIAC_SIGNS = [
    ("Capricórnio", (12, 22), (1, 19)),
    ("Aquário", (1, 20), (2, 18)),
    ("Peixes", (2, 19), (3, 20)),
    ("Áries", (3, 21), (4, 19)),
    ("Touro", (4, 20), (5, 20)),
    ("Gêmeos", (5, 21), (6, 20)),
    ("Câncer", (6, 21), (7, 22)),
    ("Leão", (7, 23), (8, 22)),
    ("Virgem", (8, 23), (9, 22)),
    ("Libra", (9, 23), (10, 22)),
    ("Escorpião", (10, 23), (11, 21)),
    ("Sagitário", (11, 22), (12, 21))
]

FALLBACK_SIGN = "Capricórnio"


def zodiac_for(day: int, month: int) -> str:
    """Returns the sign name for a day/month; year plays no part"""
    for sign, start, end in ZODIAC_SIGNS:
        if (month == start[0] and day >= start[1]) or \
           (month == end[0] and day <= end[1]):
            return sign
    return FALLBACK_SIGN


def zodiac_range(sign: str) -> str:
    """Returns the 'DD/MM - DD/MM' span of a sign, or '' if unknown"""
    for name, start, end in ZODIAC_SIGNS:
        if name == sign:
            return f"{start[1]:02d}/{start[0]:02d} - {end[1]:02d}/{end[0]:02d}"
    return ""
