from __future__ import annotations

from dataclasses import dataclass


def _normalize(tag: str) -> str:
    tag = tag.strip()
    return tag if tag.startswith("@") else f"@{tag}"


@dataclass(frozen=True)
class TagSpec:
    """Keeps scenarios carrying any included tag and none of the excluded ones.

    Scenarios inherit the tags of their feature; the executor binds them with
    `with_feature_tags` before filtering.
    """

    include: frozenset[str] = frozenset()
    exclude: frozenset[str] = frozenset()
    feature_tags: frozenset[str] = frozenset()

    @classmethod
    def parse(cls, expression: str, *, feature_tags: list[str] | None = None) -> "TagSpec":
        """Parse `@a,@b,~@c`: comma separated, `~` negates."""
        include: set[str] = set()
        exclude: set[str] = set()
        for part in expression.split(","):
            part = part.strip()
            if not part:
                continue
            if part.startswith("~"):
                exclude.add(_normalize(part[1:]))
            else:
                include.add(_normalize(part))
        if not include and not exclude:
            raise ValueError(f"Empty tag expression: {expression!r}")
        return cls(
            include=frozenset(include),
            exclude=frozenset(exclude),
            feature_tags=frozenset(_normalize(t) for t in feature_tags or []),
        )

    def with_feature_tags(self, tags: list[str]) -> "TagSpec":
        return TagSpec(
            include=self.include,
            exclude=self.exclude,
            feature_tags=frozenset(_normalize(t) for t in tags),
        )

    def matches(self, tags: list[str]) -> bool:
        effective = {_normalize(t) for t in tags} | self.feature_tags
        if effective & self.exclude:
            return False
        return not self.include or bool(effective & self.include)

    def filter(self, scenarios: list) -> list:
        return [s for s in scenarios if self.matches(list(s.tags))]
