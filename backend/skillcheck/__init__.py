"""SkillCheck: student skills assessment and course recommendations."""
