"""Avatar appearance derived from XP and the chosen style"""
from aura_quest.models.quest import Avatar

AVATAR_STYLES = ("default", "cute", "minimal")

RADIANT_XP = 500
ENERGETIC_XP = 200


def avatar_for_xp(xp: int, style: str) -> Avatar:
    """XP milestones override the style; below them the style decides"""
    if xp >= RADIANT_XP:
        return Avatar(face="✨", label="Radiant")
    if xp >= ENERGETIC_XP:
        return Avatar(face=":D", label="Energetic")
    if style == "cute":
        return Avatar(face="^_^", label="Cute")
    if style == "minimal":
        return Avatar(face=":|", label="Calm")
    return Avatar(face=":)", label="Fresh")
