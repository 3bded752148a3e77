"""Contract ABIs for the subset of functions the client calls."""


def _param(name: str, type_: str, components=None) -> dict:
    param = {"name": name, "type": type_}
    if components is not None:
        param["components"] = components
    return param


def _function(name: str, inputs, outputs, mutability: str = "view") -> dict:
    return {
        "type": "function",
        "name": name,
        "stateMutability": mutability,
        "inputs": [_param(n, t) for n, t in inputs],
        "outputs": [o if isinstance(o, dict) else _param(*o) for o in outputs],
    }


BOSS_INFO_OUTPUTS = [
    ("id", "uint256"),
    ("name", "string"),
    ("description", "string"),
    ("maxHp", "uint256"),
    ("currentHp", "uint256"),
    ("level", "uint256"),
    ("imageUrl", "string"),
    ("goldNftUrl", "string"),
    ("silverNftUrl", "string"),
    ("bronzeNftUrl", "string"),
    ("attackCount", "uint256"),
    ("isActive", "bool"),
    ("isDefeated", "bool"),
    ("skillName", "string"),
]

USER_STATS_OUTPUTS = [
    ("attackCount", "uint256"),
    ("totalDamage", "uint256"),
    ("rank", "uint256"),
]

WORLD_BOSS_SYSTEM_ABI = [
    _function("attackBoss", [("bossId", "uint256")], [], mutability="nonpayable"),
    _function("getActiveBossStatus", [], BOSS_INFO_OUTPUTS),
    _function("getBossHpPercentage", [], [("", "uint256")]),
    _function("getUserStats", [("user", "address")], USER_STATS_OUTPUTS),
]

BOSS_CORE_ABI = [
    _function("getBossInfo", [("bossId", "uint256")], BOSS_INFO_OUTPUTS),
    _function("getActiveBosses", [], [("", "uint256[]")]),
    _function(
        "getBossSkill",
        [("bossId", "uint256"), ("skillIndex", "uint256")],
        [
            ("name", "string"),
            ("duration", "uint256"),
            ("triggerInterval", "uint256"),
            ("triggerAttackCount", "uint256"),
            ("isActive", "bool"),
            ("activatedTime", "uint256"),
        ],
    ),
]

ATTACK_RECORD_COMPONENTS = [
    _param("attacker", "address"),
    _param("timestamp", "uint256"),
    _param("damage", "uint256"),
    _param("bossHpAfter", "uint256"),
    _param("recordType", "uint8"),
    _param("skillName", "string"),
]

FIGHT_RECORDS_ABI = [
    _function(
        "getLatestAttackRecords",
        [("bossId", "uint256"), ("count", "uint256")],
        [_param("", "tuple[]", ATTACK_RECORD_COMPONENTS)],
    ),
    _function(
        "getBossAttackRecords",
        [("bossId", "uint256")],
        [("attackers", "address[]"), ("damages", "uint256[]"), ("timestamps", "uint256[]")],
    ),
]

USER_STATS_ABI = [
    _function("getParticipantCount", [("bossId", "uint256")], [("", "uint256")]),
    _function("getAllParticipants", [("bossId", "uint256")], [("", "address[]")]),
    _function("getUserStats", [("bossId", "uint256"), ("user", "address")], USER_STATS_OUTPUTS),
]
