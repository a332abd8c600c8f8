"""뉴스레터 구독자 API 라우터"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import get_store
from app.schemas.content import SubscribeRequest, Subscriber
from app.services.content_store import ContentStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Subscribers"])


@router.get("/subscribers", response_model=List[Subscriber])
async def list_subscribers(store: ContentStore = Depends(get_store)):
    return store.list_subscribers()


@router.post("/subscribe", response_model=Subscriber)
async def subscribe(data: SubscribeRequest, store: ContentStore = Depends(get_store)):
    """이미 구독 중인 이메일이면 기존 구독 정보를 그대로 돌려줍니다."""
    return store.add_subscriber(data.name, data.email)


@router.delete("/subscribers/{subscriber_id}")
async def delete_subscriber(subscriber_id: str, store: ContentStore = Depends(get_store)):
    if not store.remove_subscriber(subscriber_id):
        raise HTTPException(status_code=404, detail="구독자를 찾을 수 없습니다.")
    return {"success": True}
