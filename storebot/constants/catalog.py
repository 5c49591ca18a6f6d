"""Static price tables (so'm) for every product family."""

DIAMOND_PRICES: dict[str, int] = {
    '100+80': 14000,
    '310+249': 41000,
    '520+416': 72000,
    '1060+848': 144000,
    '2180+1853': 274000,
    '5600+4760': 719000,
}

UC_PRICES: dict[str, int] = {
    '60': 12000,
    '120': 24000,
    '180': 36000,
    '325': 58000,
    '385': 70000,
    '445': 82000,
    '660': 114000,
    '720': 125000,
    '985': 170000,
    '1320': 228000,
    '1800': 285000,
    '2125': 345000,
    '2460': 400000,
    '2785': 460000,
    '3850': 555000,
    '4175': 610000,
    '4510': 670000,
    '5650': 855000,
    '8100': 1100000,
    '9900': 1385000,
    '11950': 1660000,
    '16200': 2200000,
}

PP_PRICES: dict[str, int] = {
    '1000': 2520,
    '3000': 7560,
    '5000': 12600,
    '10000': 25200,
    '20000': 50400,
    '50000': 116676,
    '100000': 235242,
}

# months -> price
PREMIUM_PRICES: dict[str, int] = {
    '3': 175000,
    '6': 235000,
    '12': 420000,
}

STARS_PRICES: dict[str, int] = {
    '50': 13000,
    '100': 25000,
    '250': 60000,
    '500': 118000,
    '1000': 232000,
}

GARDEN_PRICES: dict[str, int] = {
    'Raccoon': 45000,
    'Dragonfly': 35000,
    'Queen Bee': 30000,
    'Red Fox': 25000,
    'Disco Bee': 55000,
    'Kitsune': 60000,
}

GST_PRICES: dict[str, int] = {
    '10M': 9000,
    '50M': 40000,
    '100M': 75000,
    '500M': 350000,
}

ROBUX_PRICES: dict[str, int] = {
    '80': 14000,
    '400': 62000,
    '800': 120000,
    '1700': 245000,
    '4500': 610000,
}

FAMILY_TABLES: dict[str, dict[str, int]] = {
    'diamonds': DIAMOND_PRICES,
    'uc': UC_PRICES,
    'pp': PP_PRICES,
    'premium': PREMIUM_PRICES,
    'stars': STARS_PRICES,
    'garden': GARDEN_PRICES,
    'gst': GST_PRICES,
    'robux': ROBUX_PRICES,
}
