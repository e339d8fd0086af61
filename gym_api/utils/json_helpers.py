"""
JSON utility functions for the API.
"""
import decimal
from datetime import date, datetime


def convert_decimal_in_dict(obj):
    """
    Recursively convert Decimal and date types to JSON-friendly values.
    
    Args:
        obj: Dictionary, list, or scalar value to process
        
    Returns:
        Same structure with Decimal converted to float and dates to ISO strings
    """
    if isinstance(obj, dict):
        return {k: convert_decimal_in_dict(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [convert_decimal_in_dict(item) for item in obj]
    elif isinstance(obj, decimal.Decimal):
        return float(obj)
    elif isinstance(obj, (datetime, date)):
        return obj.isoformat()
    return obj


def envelope(data=None, message=None, success=True):
    """
    Wrap a payload in the API response envelope.

    Args:
        data: Payload, converted with convert_decimal_in_dict
        message (str, optional): Human readable message
        success (bool): Outcome flag

    Returns:
        dict: {success, data, message?}
    """
    body = {'success': success, 'data': convert_decimal_in_dict(data)}
    if message:
        body['message'] = message
    return body
