"""Result output models"""
from pydantic import BaseModel, ConfigDict


class ResultIcon(BaseModel):
    """Icon reference for a result item"""
    path: str


class EnrichedResult(BaseModel):
    """Single item in the output payload"""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "uid": "6167865",
                "title": "Toronto — 9:41 AM EDT",
                "subtitle": "Monday, October 19 | Canada | +1 | CAD | YYZ,YTZ,YKF",
                "arg": "Toronto",
                "autocomplete": "Toronto",
                "icon": {"path": "flags/canada.png"}
            }
        }
    )

    uid: str
    title: str
    subtitle: str
    arg: str
    autocomplete: str
    icon: ResultIcon
