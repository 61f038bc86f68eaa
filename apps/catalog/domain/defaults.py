"""Default protection-type and industry categories inserted by ``seed_categories``."""

from __future__ import annotations

DEFAULT_CATEGORIES: list[dict] = [
    {
        "name": "Head Protection",
        "description": "Safety helmets, hard hats, bump caps, and head protection equipment",
        "type": "protection_type",
        "icon": "🪖",
        "color_primary": "#3b82f6",
        "color_secondary": "#dbeafe",
        "sort_order": 1,
        "is_featured": True,
        "meta_title": "Head Protection Equipment - Safety Helmets & Hard Hats",
        "keywords": ["safety helmet", "hard hat", "head protection", "construction helmet"],
    },
    {
        "name": "Foot Protection",
        "description": "Safety boots, shoes, toe caps, and foot protection equipment",
        "type": "protection_type",
        "icon": "🥾",
        "color_primary": "#059669",
        "color_secondary": "#d1fae5",
        "sort_order": 2,
        "is_featured": True,
        "meta_title": "Foot Protection Equipment - Safety Boots & Shoes",
        "keywords": ["safety boots", "steel toe", "foot protection", "work boots"],
    },
    {
        "name": "Eye Protection",
        "description": "Safety glasses, goggles, face shields, and eye protection equipment",
        "type": "protection_type",
        "icon": "🥽",
        "color_primary": "#7c3aed",
        "color_secondary": "#ede9fe",
        "sort_order": 3,
        "is_featured": True,
        "meta_title": "Eye Protection Equipment - Safety Glasses & Goggles",
        "keywords": ["safety glasses", "goggles", "eye protection", "face shield"],
    },
    {
        "name": "Hand Protection",
        "description": "Work gloves, chemical resistant gloves, and hand protection equipment",
        "type": "protection_type",
        "icon": "🧤",
        "color_primary": "#dc2626",
        "color_secondary": "#fee2e2",
        "sort_order": 4,
        "is_featured": True,
        "meta_title": "Hand Protection Equipment - Work Gloves & Safety Gloves",
        "keywords": ["work gloves", "safety gloves", "hand protection", "chemical resistant"],
    },
    {
        "name": "Breathing Protection",
        "description": "Masks, respirators, filters, and breathing protection equipment",
        "type": "protection_type",
        "icon": "😷",
        "color_primary": "#0891b2",
        "color_secondary": "#cffafe",
        "sort_order": 5,
        "is_featured": True,
        "meta_title": "Breathing Protection Equipment - Masks & Respirators",
        "keywords": ["respirator", "N95 mask", "breathing protection", "air filter"],
    },
    {
        "name": "Workwear & Clothing",
        "description": "High-visibility vests, coveralls, uniforms, and protective clothing",
        "type": "protection_type",
        "icon": "🦺",
        "color_primary": "#ea580c",
        "color_secondary": "#fed7aa",
        "sort_order": 6,
        "is_featured": True,
        "meta_title": "Workwear & Protective Clothing - High-Vis Vests & Coveralls",
        "keywords": ["high-vis vest", "coveralls", "workwear", "protective clothing"],
    },
    {
        "name": "Medical & Healthcare",
        "description": "Safety equipment for hospitals, clinics, and healthcare professionals",
        "type": "industry",
        "icon": "🏥",
        "color_primary": "#0891b2",
        "color_secondary": "#cffafe",
        "sort_order": 10,
        "is_featured": True,
        "meta_title": "Medical Safety Equipment - Healthcare PPE & Supplies",
        "keywords": ["medical PPE", "healthcare safety", "hospital equipment", "medical supplies"],
    },
    {
        "name": "Construction & Building",
        "description": "Safety equipment for construction sites, building, and infrastructure projects",
        "type": "industry",
        "icon": "🏗️",
        "color_primary": "#ea580c",
        "color_secondary": "#fed7aa",
        "sort_order": 11,
        "is_featured": True,
        "meta_title": "Construction Safety Equipment - Building Site PPE",
        "keywords": ["construction safety", "building site PPE", "contractor equipment", "construction gear"],
    },
    {
        "name": "Manufacturing & Industrial",
        "description": "Safety equipment for factories, plants, and industrial environments",
        "type": "industry",
        "icon": "🏭",
        "color_primary": "#059669",
        "color_secondary": "#d1fae5",
        "sort_order": 12,
        "is_featured": True,
        "meta_title": "Industrial Safety Equipment - Manufacturing PPE",
        "keywords": ["industrial safety", "manufacturing PPE", "factory equipment", "industrial gear"],
    },
    {
        "name": "Oil & Gas",
        "description": "Safety equipment for oil rigs, gas plants, and petroleum industry",
        "type": "industry",
        "icon": "⛽",
        "color_primary": "#7c2d12",
        "color_secondary": "#fed7aa",
        "sort_order": 13,
        "meta_title": "Oil & Gas Safety Equipment - Petroleum Industry PPE",
        "keywords": ["oil gas safety", "petroleum PPE", "refinery equipment", "offshore safety"],
    },
    {
        "name": "Mining & Quarrying",
        "description": "Safety equipment for mines, quarries, and extraction operations",
        "type": "industry",
        "icon": "⛏️",
        "color_primary": "#92400e",
        "color_secondary": "#fef3c7",
        "sort_order": 14,
        "meta_title": "Mining Safety Equipment - Quarrying PPE & Gear",
        "keywords": ["mining safety", "quarry PPE", "mining equipment", "extraction gear"],
    },
    {
        "name": "Agriculture & Forestry",
        "description": "Safety equipment for farms, forestry, and agricultural operations",
        "type": "industry",
        "icon": "🌾",
        "color_primary": "#16a34a",
        "color_secondary": "#dcfce7",
        "sort_order": 15,
        "meta_title": "Agricultural Safety Equipment - Farming & Forestry PPE",
        "keywords": ["agricultural safety", "farming PPE", "forestry equipment", "farm gear"],
    },
]
