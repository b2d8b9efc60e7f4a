from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Plain acknowledgement response."""
    
    success: bool = True
    message: str
