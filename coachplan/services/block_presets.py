"""Built-in block presets trainers can drop into a plan."""
import copy
import re
import unicodedata

PRESETS = [
    # cardio
    {
        "id": "hiit-bike-10x30",
        "name": "HIIT Bike 10x30",
        "description": "10 rounds of 30s hard + 30s easy",
        "type": "cardio",
        "category": "HIIT",
        "popular": True,
        "estimated_minutes": 10,
        "config": {
            "equipment": "bike", "modality": "hiit", "duration_minutes": 10,
            "work_seconds": 30, "rest_seconds": 30, "rounds": 10,
            "intensity": {"value": 90, "unit": "percent"},
        },
    },
    {
        "id": "treadmill-continuous-20",
        "name": "Treadmill 20min Continuous",
        "description": "Moderate steady run",
        "type": "cardio",
        "category": "Continuous",
        "popular": True,
        "estimated_minutes": 20,
        "config": {
            "equipment": "treadmill", "modality": "continuous", "duration_minutes": 20,
            "speed_kmh": 10, "incline_percent": 2,
            "heart_rate_target": {"min": 130, "max": 150},
        },
    },
    {
        "id": "rower-intervals-15",
        "name": "Rowing Intervals 15min",
        "description": "5 rounds of 2min work + 1min rest",
        "type": "cardio",
        "category": "Interval",
        "popular": False,
        "estimated_minutes": 15,
        "config": {
            "equipment": "rower", "modality": "interval", "duration_minutes": 15,
            "work_seconds": 120, "rest_seconds": 60, "rounds": 5,
        },
    },
    {
        "id": "airbike-sprint",
        "name": "Airbike Sprint",
        "description": "20s all-out + 40s recovery, 8 rounds",
        "type": "cardio",
        "category": "HIIT",
        "popular": True,
        "estimated_minutes": 8,
        "config": {
            "equipment": "airbike", "modality": "hiit", "duration_minutes": 8,
            "work_seconds": 20, "rest_seconds": 40, "rounds": 8,
            "intensity": {"value": 95, "unit": "percent"},
        },
    },
    # stretch / mobility
    {
        "id": "stretch-lower-body",
        "name": "Lower Body Stretch",
        "description": "Legs and hips",
        "type": "stretch",
        "category": "General",
        "popular": True,
        "estimated_minutes": 8,
        "config": {
            "muscle_groups": ["Quadriceps", "Hamstrings", "Glutes", "Calves"],
            "duration_minutes": 8, "style": "static",
        },
    },
    {
        "id": "stretch-upper-body",
        "name": "Upper Body Stretch",
        "description": "Shoulders, chest and back",
        "type": "stretch",
        "category": "General",
        "popular": True,
        "estimated_minutes": 6,
        "config": {
            "muscle_groups": ["Shoulders", "Chest", "Lats", "Triceps"],
            "duration_minutes": 6, "style": "static",
        },
    },
    {
        "id": "hip-mobility",
        "name": "Hip Mobility",
        "description": "90/90, cossack squat, hip circles",
        "type": "stretch",
        "category": "Mobility",
        "popular": True,
        "estimated_minutes": 10,
        "config": {
            "muscle_groups": ["Hips", "Adductors", "Glutes"],
            "duration_minutes": 10, "style": "dynamic",
            "notes": "90/90, cossack squat, hip circles, world's greatest stretch",
        },
    },
    {
        "id": "shoulder-mobility",
        "name": "Shoulder Mobility",
        "description": "Band pull-aparts, wall slides, circles",
        "type": "stretch",
        "category": "Mobility",
        "popular": True,
        "estimated_minutes": 8,
        "config": {
            "muscle_groups": ["Shoulders", "Scapula", "Thoracic spine"],
            "duration_minutes": 8, "style": "dynamic",
            "notes": "Band pull-aparts, wall slides, shoulder circles",
        },
    },
    # warm-up
    {
        "id": "warmup-quick",
        "name": "Quick Warm-up",
        "description": "Easy bike + dynamic moves",
        "type": "warmup",
        "category": "Quick",
        "popular": True,
        "estimated_minutes": 5,
        "config": {
            "duration_minutes": 5, "style": "general",
            "activities": ["Easy bike 3min", "Jumping jacks", "Arm circles"],
        },
    },
    {
        "id": "warmup-full",
        "name": "Full Warm-up",
        "description": "Cardio + mobility + activation",
        "type": "warmup",
        "category": "Complete",
        "popular": True,
        "estimated_minutes": 10,
        "config": {
            "duration_minutes": 10, "style": "general",
            "activities": ["Treadmill 5min", "Dynamic mobility", "Glute activation", "Core prep"],
        },
    },
    # cool-down
    {
        "id": "cool-down",
        "name": "Cool-down",
        "description": "Easy walk + diaphragmatic breathing",
        "type": "other",
        "category": "Recovery",
        "popular": True,
        "estimated_minutes": 5,
        "config": None,
    },
]

_BY_ID = {p["id"]: p for p in PRESETS}


def normalize_name(name):
    text = unicodedata.normalize("NFD", name or "")
    text = "".join(c for c in text if not unicodedata.combining(c))
    return re.sub(r"\s+", " ", text).strip().lower()


def list_presets(block_type=None, popular_only=False):
    presets = PRESETS
    if block_type:
        presets = [p for p in presets if p["type"] == block_type]
    if popular_only:
        presets = [p for p in presets if p["popular"]]
    return copy.deepcopy(presets)


def get_preset(preset_id):
    preset = _BY_ID.get(preset_id)
    return copy.deepcopy(preset) if preset else None


def hydrate_config(block_type, name, config):
    """Fill a missing config from the preset sharing the block's type and name."""
    if config or block_type == "other":
        return config
    key = normalize_name(name)
    if not key:
        return config
    for preset in PRESETS:
        if preset["type"] == block_type and normalize_name(preset["name"]) == key:
            return copy.deepcopy(preset["config"])
    return config
