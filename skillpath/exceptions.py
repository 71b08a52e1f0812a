from __future__ import annotations


class SkillPathError(RuntimeError):
    pass


class GraphValidationError(SkillPathError):
    def __init__(self, skill: str, message: str) -> None:
        super().__init__(f"{skill}: {message}")
        self.skill = skill


class PrerequisiteCycleError(GraphValidationError):
    """Prerequisite edges of a learning graph contain a cycle.

    `node_ids` holds the nodes Kahn's algorithm could not release, i.e. the cycle members
    and everything that depends on them.
    """

    def __init__(self, skill: str, node_ids: list[str]) -> None:
        super().__init__(skill, f"prerequisite cycle among nodes {sorted(node_ids)}")
        self.node_ids = list(node_ids)


class GeneratorError(SkillPathError):
    pass
