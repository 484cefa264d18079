from pydantic import BaseModel, ConfigDict, Field


class TriggerPipelineRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    post_url: str = Field(alias="postUrl", min_length=1, description="Instagram post URL to scrape")
    max_items: int = Field(default=10, alias="maxItems", ge=1, le=100)
