"""
Input validation utilities for the boundary layer
"""
import re
from typing import Optional


class ValidationError(Exception):
    """Custom validation error"""
    pass


def normalize_note(note: Optional[str]) -> str:
    """
    Trim a customer note
    
    Args:
        note: Free-text note or None
        
    Returns:
        Trimmed note, empty string when no note was given
    """
    return (note or "").strip()


def validate_note(note: Optional[str], max_length: int = 200) -> str:
    """
    Validate a customer note/question
    
    Args:
        note: Free-text note
        max_length: Maximum allowed characters after trimming
        
    Returns:
        Trimmed note (may be empty)
        
    Raises:
        ValidationError: If the note is too long
    """
    note = normalize_note(note)
    
    if len(note) > max_length:
        raise ValidationError(f"Note too long ({len(note)} > {max_length} characters)")
    
    return note


def validate_quantity(quantity: int) -> int:
    """
    Validate a requested line quantity
    
    Args:
        quantity: Requested quantity
        
    Returns:
        Validated quantity
        
    Raises:
        ValidationError: If quantity is not an integer
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("Quantity must be an integer")
    
    return quantity


def validate_language_code(lang: str) -> str:
    """
    Validate language code (ISO 639-1 format)
    
    Args:
        lang: Language code (2-8 characters)
        
    Returns:
        Validated language code in lowercase
        
    Raises:
        ValidationError: If language code is invalid
    """
    lang = lang.strip().lower()
    
    if not re.match(r'^[a-z]{2,8}$', lang):
        raise ValidationError("Invalid language code format (expected 2-8 lowercase letters)")
    
    return lang


def validate_dish_name(name: Optional[str], max_length: int = 255) -> str:
    """
    Validate a dish name submitted for the shared catalog
    
    Args:
        name: Proposed dish name
        max_length: Maximum length
        
    Returns:
        Trimmed dish name
        
    Raises:
        ValidationError: If the name is empty or too long
    """
    name = (name or "").strip()
    
    if not name:
        raise ValidationError("Dish name cannot be empty")
    
    if len(name) > max_length:
        raise ValidationError(f"Dish name too long (max {max_length} characters)")
    
    return name
