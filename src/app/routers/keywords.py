# src/app/routers/keywords.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from src.app.deps import get_keyword_generator
from src.app.schemas.keywords import (
    CustomContextIn,
    CustomContextOut,
    GenerateKeywordsRequest,
    GenerateKeywordsResponse,
    KeywordAnalyticsOut,
    KeywordVariationOut,
)
from src.app.services.keywords import KeywordGenerator
from src.services.domains import normalize_domain

router = APIRouter(prefix="/keywords", tags=["keywords"])


@router.post("/generate", response_model=GenerateKeywordsResponse)
async def generate_keywords(
    payload: GenerateKeywordsRequest,
    generator: KeywordGenerator = Depends(get_keyword_generator),
) -> GenerateKeywordsResponse:
    domains = [d.strip() for d in payload.domains if d and d.strip()]
    if not domains:
        raise HTTPException(status_code=400, detail="At least one domain is required")

    results = generator.generate_many(domains, payload.prompt, payload.count)
    return GenerateKeywordsResponse(results={
        domain: [KeywordVariationOut.from_variation(v) for v in variations]
        for domain, variations in results.items()
    })


@router.get("/{domain}/analytics", response_model=KeywordAnalyticsOut)
async def keyword_analytics(
    domain: str,
    days: int = Query(default=30, ge=1, le=365),
    generator: KeywordGenerator = Depends(get_keyword_generator),
) -> KeywordAnalyticsOut:
    analytics = generator.get_analytics(domain, days=days)
    return KeywordAnalyticsOut.from_analytics(normalize_domain(domain), days, analytics)


@router.get("/{domain}/context", response_model=CustomContextOut)
async def get_context(
    domain: str,
    generator: KeywordGenerator = Depends(get_keyword_generator),
) -> CustomContextOut:
    context = generator.get_custom_context(domain)
    if context is None:
        raise HTTPException(status_code=404, detail=f"No custom context for {domain}")
    return CustomContextOut.from_context(normalize_domain(domain), context)


@router.put("/{domain}/context", response_model=CustomContextOut)
async def put_context(
    domain: str,
    payload: CustomContextIn,
    generator: KeywordGenerator = Depends(get_keyword_generator),
) -> CustomContextOut:
    context = payload.to_context()
    generator.set_custom_context(domain, context)
    return CustomContextOut.from_context(normalize_domain(domain), context)


@router.delete("/{domain}/context", status_code=status.HTTP_204_NO_CONTENT)
async def delete_context(
    domain: str,
    generator: KeywordGenerator = Depends(get_keyword_generator),
) -> Response:
    if not generator.remove_custom_context(domain):
        raise HTTPException(status_code=404, detail=f"No custom context for {domain}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
