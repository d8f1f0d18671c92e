class Ability:
    def __init__(self, name, ability_id, cooldown=None):
        self.name = name
        self.ability_id = ability_id
        # seconds, used to estimate how many casts a fight allowed
        self.cooldown = cooldown * 1000 if cooldown is not None else None

    def __repr__(self):
        return f"Ability({self.name!r}, {self.ability_id})"


class AbilityCatalog:
    def __init__(self, abilities):
        self._abilities = list(abilities)
        self._by_id = {ability.ability_id: ability for ability in self._abilities}

    def __contains__(self, ability_id):
        return ability_id in self._by_id

    def __iter__(self):
        return iter(self._abilities)

    def __len__(self):
        return len(self._abilities)

    def get(self, ability_id):
        return self._by_id.get(ability_id)

    def extend(self, abilities):
        return AbilityCatalog(self._abilities + list(abilities))


# Racials and consumables any spec can use
BERSERKING = Ability("Berserking", 26297, cooldown=180)
BLOOD_FURY = Ability("Blood Fury", 33702, cooldown=120)
POTION_OF_PROLONGED_POWER = Ability("Potion of Prolonged Power", 229206)

# Affliction Warlock
SOUL_HARVEST = Ability("Soul Harvest", 196098, cooldown=120)
SUMMON_INFERNAL = Ability("Summon Infernal", 1122, cooldown=180)
SUMMON_DOOMGUARD = Ability("Summon Doomguard", 18540, cooldown=180)
GRIMOIRE_IMP = Ability("Grimoire: Imp", 111859, cooldown=90)
GRIMOIRE_VOIDWALKER = Ability("Grimoire: Voidwalker", 111895, cooldown=90)
GRIMOIRE_SUCCUBUS = Ability("Grimoire: Succubus", 111896, cooldown=90)
GRIMOIRE_FELHUNTER = Ability("Grimoire: Felhunter", 111897, cooldown=90)
UNSTABLE_AFFLICTION = Ability("Unstable Affliction", 30108)
AGONY = Ability("Agony", 980)
CORRUPTION = Ability("Corruption", 172)

ABILITIES = AbilityCatalog(
    [
        BERSERKING,
        BLOOD_FURY,
        POTION_OF_PROLONGED_POWER,
        SOUL_HARVEST,
        SUMMON_INFERNAL,
        SUMMON_DOOMGUARD,
        GRIMOIRE_IMP,
        GRIMOIRE_VOIDWALKER,
        GRIMOIRE_SUCCUBUS,
        GRIMOIRE_FELHUNTER,
        UNSTABLE_AFFLICTION,
        AGONY,
        CORRUPTION,
    ]
)
