"""
FastAPI web application for the keyword engine
"""
from fastapi import FastAPI, HTTPException, Depends, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator
from typing import List, Dict, Any, Optional
import logging
from datetime import datetime
import uvicorn

from app import KeywordEngineApp
from config import config
from exceptions import KeywordNotFoundError, KeywordValidationError
from models import CompetitorSignal, KeywordStatus, PriorityTier

logger = logging.getLogger(__name__)

# Pydantic models for API requests
class ClassifyRequest(BaseModel):
    volumes: List[int]

    @field_validator('volumes')
    @classmethod
    def volumes_must_be_valid(cls, v):
        if not v:
            raise ValueError('Volumes list cannot be empty')
        if any(volume < 0 for volume in v):
            raise ValueError('Search volumes cannot be negative')
        return v

class CompetitorRequest(BaseModel):
    has_ai_overview: bool = False
    top_competitors_cover: bool = True
    average_content_quality: float = Field(100.0, ge=0, le=100)

class ScoreRequest(BaseModel):
    text: str
    competitor: Optional[CompetitorRequest] = None

class KeywordCreateRequest(BaseModel):
    text: str
    search_volume: int = Field(0, ge=0)
    cpc: float = Field(0.0, ge=0)
    status: KeywordStatus = KeywordStatus.DRAFT

    @field_validator('text')
    @classmethod
    def text_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('Keyword text cannot be empty')
        return v

class KeywordUpdateRequest(BaseModel):
    text: Optional[str] = None
    search_volume: Optional[int] = Field(None, ge=0)
    cpc: Optional[float] = Field(None, ge=0)
    status: Optional[KeywordStatus] = None

class KeywordIdsRequest(BaseModel):
    keyword_ids: List[str]

    @field_validator('keyword_ids')
    @classmethod
    def ids_must_not_be_empty(cls, v):
        if not v:
            raise ValueError('Keyword ids list cannot be empty')
        return v

class RecomputeRequest(KeywordIdsRequest):
    rescore: bool = False

# Response models
class APIResponse(BaseModel):
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None
    timestamp: datetime

class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    components: Dict[str, Any]
    keywords: int

# Initialize FastAPI app
app = FastAPI(
    title="Keyword Engine API",
    description="Keyword priority tiers and AI-Overview adaptability scoring",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global engine app instance
engine_app = None

@app.on_event("startup")
async def startup_event():
    """Initialize the engine app on startup"""
    global engine_app
    engine_app = KeywordEngineApp()
    logger.info("Keyword Engine API started successfully")

@app.on_event("shutdown")
async def shutdown_event():
    """Clean up on shutdown"""
    if engine_app:
        engine_app.shutdown()
        logger.info("Keyword Engine API shut down successfully")

def get_engine_app():
    """Dependency to get the engine app instance"""
    if engine_app is None:
        raise HTTPException(status_code=500, detail="Engine app not initialized")
    return engine_app

def _response(message: str, data: Optional[Dict[str, Any]] = None) -> APIResponse:
    return APIResponse(success=True, message=message, data=data, timestamp=datetime.now())

# API Endpoints

@app.get("/", response_model=Dict[str, str])
async def root():
    """Root endpoint"""
    return {
        "message": "Keyword Engine API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }

@app.get("/health", response_model=HealthResponse)
async def health_check(app: KeywordEngineApp = Depends(get_engine_app)):
    """Health check endpoint"""
    status = app.get_system_status()
    return HealthResponse(
        status=status["health"]["overall_status"],
        timestamp=datetime.now(),
        components=status["health"]["components"],
        keywords=status["keywords"]
    )

@app.get("/priorities", response_model=APIResponse)
async def get_priorities(app: KeywordEngineApp = Depends(get_engine_app)):
    """Priority tier configuration, P0 first"""
    tiers = app.list_tiers()
    return _response(f"Retrieved {len(tiers)} priority tiers", {"tiers": tiers})

@app.post("/classify", response_model=APIResponse)
async def classify_volumes(request: ClassifyRequest, app: KeywordEngineApp = Depends(get_engine_app)):
    """Classify search volumes into priority tiers"""
    results = [app.classify(volume) for volume in request.volumes]
    return _response(f"Classified {len(results)} search volumes", {"results": results})

@app.post("/score", response_model=APIResponse)
async def score_keyword(request: ScoreRequest, app: KeywordEngineApp = Depends(get_engine_app)):
    """Score a keyword phrase without storing it"""
    competitor = CompetitorSignal(**request.competitor.model_dump()) if request.competitor else None
    analysis = app.engine.score(request.text, competitor)
    app.metrics_collector.record_score()
    return _response("AIO analysis completed", {"keyword": request.text, "analysis": analysis.to_dict()})

@app.get("/keywords", response_model=APIResponse)
async def list_keywords(
    search: Optional[str] = Query(None, description="Case-insensitive text filter"),
    priority: Optional[PriorityTier] = Query(None, description="Filter by priority tier"),
    status: Optional[KeywordStatus] = Query(None, description="Filter by keyword status"),
    min_aio_score: Optional[int] = Query(None, ge=0, le=100, description="Minimum AIO score"),
    page: int = Query(1, ge=1),
    limit: int = Query(config.default_page_limit, ge=1, le=config.max_page_limit),
    include_analysis: bool = Query(False, description="Include priority info and AIO analysis"),
    app: KeywordEngineApp = Depends(get_engine_app)
):
    """List keywords sorted by search volume"""
    result = app.catalog.list_keywords(
        search=search, priority=priority, status=status, min_aio_score=min_aio_score,
        page=page, limit=limit, include_analysis=include_analysis
    )
    return _response(
        f"Retrieved {len(result.items)} of {result.total} keywords",
        {"items": result.items, "total": result.total, "page": result.page, "limit": result.limit}
    )

@app.get("/keywords/{keyword_id}", response_model=APIResponse)
async def get_keyword(keyword_id: str, app: KeywordEngineApp = Depends(get_engine_app)):
    """Get a single keyword with its analysis"""
    record = app.catalog.get(keyword_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Keyword {keyword_id} not found")
    return _response("Keyword retrieved", record.to_dict())

@app.post("/keywords", response_model=APIResponse, status_code=201)
async def create_keyword(request: KeywordCreateRequest, app: KeywordEngineApp = Depends(get_engine_app)):
    """Create a keyword, classifying and scoring it"""
    try:
        record = app.catalog.create(request.text, request.search_volume, request.cpc, request.status)
    except KeywordValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _response(f"Keyword {record.id} created", record.to_dict())

@app.patch("/keywords/{keyword_id}", response_model=APIResponse)
async def update_keyword(keyword_id: str, request: KeywordUpdateRequest,
                         app: KeywordEngineApp = Depends(get_engine_app)):
    """Update a keyword, recomputing its annotations as needed"""
    try:
        record = app.catalog.update(
            keyword_id, text=request.text, search_volume=request.search_volume,
            cpc=request.cpc, status=request.status
        )
    except KeywordNotFoundError:
        raise HTTPException(status_code=404, detail=f"Keyword {keyword_id} not found")
    except KeywordValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _response(f"Keyword {keyword_id} updated", record.to_dict())

@app.delete("/keywords/{keyword_id}", response_model=APIResponse)
async def delete_keyword(keyword_id: str, app: KeywordEngineApp = Depends(get_engine_app)):
    """Delete a keyword"""
    try:
        app.catalog.delete(keyword_id)
    except KeywordNotFoundError:
        raise HTTPException(status_code=404, detail=f"Keyword {keyword_id} not found")
    return _response(f"Keyword {keyword_id} deleted", {"keyword_id": keyword_id})

@app.post("/keywords/recompute", response_model=APIResponse)
async def recompute_keywords(request: RecomputeRequest, app: KeywordEngineApp = Depends(get_engine_app)):
    """Recompute priorities (and optionally AIO analyses) for a batch of keywords"""
    result = app.catalog.recompute_many(request.keyword_ids, rescore=request.rescore)
    return _response(
        f"Recomputed {len(result)}/{len(request.keyword_ids)} keywords",
        {"updated": [record.to_dict() for record in result], "skipped_ids": result.skipped_ids}
    )

@app.post("/keywords/analyze", response_model=APIResponse)
async def analyze_keywords(request: KeywordIdsRequest, app: KeywordEngineApp = Depends(get_engine_app)):
    """Fresh AIO analyses for stored keywords"""
    results = app.catalog.analyze_many(request.keyword_ids)
    data = [
        {"id": r["id"], "keyword": r["keyword"], "aio_score": r["analysis"].score,
         "analysis": r["analysis"].to_dict()}
        for r in results
    ]
    return _response(f"Analyzed {len(data)} keywords", {"results": data})

@app.get("/distribution", response_model=APIResponse)
async def get_distribution(app: KeywordEngineApp = Depends(get_engine_app)):
    """Priority distribution across the catalog"""
    return _response("Distribution computed", app.get_distribution())

@app.get("/distribution/aio", response_model=APIResponse)
async def get_aio_distribution(app: KeywordEngineApp = Depends(get_engine_app)):
    """AIO score statistics per priority tier"""
    return _response("AIO statistics computed", {"tiers": app.get_aio_stats()})

@app.get("/metrics", response_model=APIResponse)
async def get_metrics(app: KeywordEngineApp = Depends(get_engine_app)):
    """Get engine metrics"""
    return _response("Metrics retrieved successfully", {"metrics": app.metrics_collector.get_metrics()})

# Custom exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "timestamp": datetime.now().isoformat()
        }
    )

if __name__ == "__main__":
    uvicorn.run(
        "api:app",
        host=config.api_host,
        port=config.api_port,
        reload=True,
        log_level="info"
    )
