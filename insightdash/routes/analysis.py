from fastapi import APIRouter

from insightdash.schemas.analysis import DataAnalysis
from insightdash.schemas.cleaning import DatasetRequest
from insightdash.services.ai_analysis import analyze_data_with_ai

router = APIRouter(prefix="/analysis", tags=["ai-analysis"])


@router.post("", response_model=DataAnalysis)
def analyze(payload: DatasetRequest):
    """
    AI reviews the column names + a 5-row sample and returns:
    - Key insights
    - Recommended chart types
    - Notable patterns
    - Business recommendations
    """
    return analyze_data_with_ai(payload.rows, payload.columns)
