from __future__ import annotations

from fastapi import APIRouter, Request

from ..schemas import SuggestRequest

router = APIRouter(prefix='/dict', tags=['dictionary'])

@router.get('/validate')
def validate_word(word: str, request: Request):
    valid = request.app.state.dictionary.is_valid(word)
    return { 'word': word.upper(), 'valid': valid }

@router.get('/define')
def define_word(word: str, request: Request):
    definition = request.app.state.definitions.get_definition(word)
    return { 'word': word.upper(), 'definition': definition }

@router.post('/suggest', status_code=201)
def suggest_word(body: SuggestRequest, request: Request):
    pending = request.app.state.suggestions.suggest(body.word)
    return { 'word': body.word.strip().upper(), 'pending': len(pending) }
