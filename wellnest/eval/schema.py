# wellnest/eval/schema.py
# Labelled utterance for the offline crisis eval (one entry of `items:`).
ITEM_SCHEMA = {
    "type": "object",
    "required": ["text", "expect"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "text": {"type": "string"},
        "lang": {"type": "string", "minLength": 1},
        "expect": {"enum": ["low", "moderate", "high", "imminent"]},
        "notes": {"type": "string"}
    },
    "additionalProperties": False
}

CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "out_path": {"type": "string", "minLength": 1},
        "policy_dir": {"type": "string"},
        "scan_all_languages": {"type": "boolean"},
        "items": {"type": "array", "items": ITEM_SCHEMA}
    },
    "additionalProperties": False
}
