"""Pydantic models describing the NerdGraph payloads."""

from __future__ import annotations

from logging import getLogger

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

log = getLogger(__name__)


def _none_to_list(value: object) -> object:
    return [] if value is None else value


class NerdGraphBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GraphQLErrorPayload(NerdGraphBaseModel):
    message: str = ""
    path: list[str | int] | None = None


class GraphQLEnvelope(NerdGraphBaseModel):
    data: dict[str, object] | None = None
    errors: list[GraphQLErrorPayload] = Field(default_factory=list)

    _normalize_errors = field_validator("errors", mode="before")(_none_to_list)


# NRQL


class NrqlRow(NerdGraphBaseModel):
    facet: list[str | None] | str | None = None

    @property
    def facets(self) -> tuple[str | None, ...]:
        if self.facet is None:
            return ()
        if isinstance(self.facet, str):
            return (self.facet,)
        return tuple(self.facet)


class NrqlResult(NerdGraphBaseModel):
    results: list[NrqlRow] = Field(default_factory=list)

    _normalize_results = field_validator("results", mode="before")(_none_to_list)


class NrqlAccount(NerdGraphBaseModel):
    nrql: NrqlResult | None = None


class NrqlActor(NerdGraphBaseModel):
    account: NrqlAccount | None = None


class NrqlData(NerdGraphBaseModel):
    actor: NrqlActor | None = None

    @property
    def rows(self) -> list[NrqlRow]:
        if self.actor is None or self.actor.account is None or self.actor.account.nrql is None:
            return []
        return self.actor.account.nrql.results


# Related entities


class TagPayload(NerdGraphBaseModel):
    key: str | None = None
    values: list[str | None] = Field(default_factory=list)

    _normalize_values = field_validator("values", mode="before")(_none_to_list)


class EntityOutlinePayload(NerdGraphBaseModel):
    guid: str | None = None
    name: str | None = None
    tags: list[TagPayload | None] | None = None


class RelatedEntitySide(NerdGraphBaseModel):
    entity: EntityOutlinePayload | None = None


class RelatedEntityPayload(NerdGraphBaseModel):
    source: RelatedEntitySide | None = None


class RelatedEntitiesPayload(NerdGraphBaseModel):
    results: list[RelatedEntityPayload] = Field(default_factory=list)
    next_cursor: str | None = Field(default=None, alias="nextCursor")

    @field_validator("results", mode="before")
    @classmethod
    def _validate_each_result(cls, value: object) -> object:
        # A malformed record becomes an empty one instead of failing the page.
        if not isinstance(value, list):
            return _none_to_list(value)
        results: list[RelatedEntityPayload] = []
        for item in value:
            try:
                results.append(RelatedEntityPayload.model_validate(item))
            except ValidationError as exc:
                log.warning("Ignoring malformed related entity: %s", exc)
                results.append(RelatedEntityPayload())
        return results


class EntityPayload(NerdGraphBaseModel):
    related_entities: RelatedEntitiesPayload | None = Field(default=None, alias="relatedEntities")


class EntityActor(NerdGraphBaseModel):
    entity: EntityPayload | None = None


class RelatedEntitiesData(NerdGraphBaseModel):
    actor: EntityActor | None = None

    @property
    def related_entities(self) -> RelatedEntitiesPayload | None:
        if self.actor is None or self.actor.entity is None:
            return None
        return self.actor.entity.related_entities


# Mutations


class MutationErrorPayload(NerdGraphBaseModel):
    type: str | None = None
    message: str | None = None


class MutationResultPayload(NerdGraphBaseModel):
    errors: list[MutationErrorPayload] = Field(default_factory=list)

    _normalize_errors = field_validator("errors", mode="before")(_none_to_list)
