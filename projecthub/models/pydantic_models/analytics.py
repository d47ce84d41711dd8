from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class GroupCountModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str | None = Field(default=None, alias="_id")
    count: int


class StatsModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_count: int
    project_count: int
    user_projects: int
    projects_by_status: list[GroupCountModel]
    projects_by_technology: list[GroupCountModel]
