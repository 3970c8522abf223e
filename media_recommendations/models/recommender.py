from pydantic import BaseModel, ConfigDict, Field

SERVING_CONFIG_PATH = "projects/{project}/locations/{location}/dataStores/{data_store}/servingConfigs/{serving_config}"
DOCUMENT_PATH = "projects/{project}/locations/{location}/dataStores/{data_store}/branches/{branch}/documents/{id}"


class Configuration(BaseModel):
    """Static settings shared by every request of a run."""
    model_config = ConfigDict(frozen=True)

    project: str = Field(min_length=1)
    location: str = Field(default="global", min_length=1)
    data_store: str = Field(default="default_data_store", min_length=1)
    branch: str = Field(default="0", min_length=1)
    serving_config: str = Field(min_length=1)
    page_size: int = Field(default=5, ge=1, le=100)
    filter: str = ""

    @property
    def serving_config_path(self) -> str:
        return SERVING_CONFIG_PATH.format(
            project=self.project,
            location=self.location,
            data_store=self.data_store,
            serving_config=self.serving_config,
        )

    def document_name(self, document_id: str) -> str:
        return DOCUMENT_PATH.format(
            project=self.project,
            location=self.location,
            data_store=self.data_store,
            branch=self.branch,
            id=document_id,
        )


class RecommendationResult(BaseModel):
    id: str
    title: str = ""
    score: str
