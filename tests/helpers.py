GOBLIN = {
    "index": "goblin",
    "name": "Goblin",
    "size": "Small",
    "type": "humanoid",
    "armor_class": [{"value": 15}],
    "hit_points": 7,
    "hit_dice": "2d6",
    "speed": {"walk": "30 ft."},
    "strength": 8,
    "dexterity": 14,
    "constitution": 10,
    "intelligence": 10,
    "wisdom": 8,
    "charisma": 8,
    "challenge_rating": 0.25,
    "xp": 50,
    "actions": [
        {
            "name": "Scimitar",
            "attack_bonus": 4,
            "damage": [{"damage_dice": "1d6+2", "damage_type": {"name": "Slashing"}}],
        }
    ],
}
