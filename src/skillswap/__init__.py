"""SkillSwap API: skill-exchange marketplace backend."""
