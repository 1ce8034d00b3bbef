# backend/newsroom/auth/models.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base

class PasswordResetToken(Base):
    """일회용 비밀번호 재설정 토큰. 원문은 저장하지 않고 SHA-256 해시만 보관합니다."""
    __tablename__ = "password_reset_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = Column(String(64), unique=True, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="reset_tokens")

    def __repr__(self) -> str:
        return f"PasswordResetToken(id={self.id}, user_id={self.user_id}, expires_at={self.expires_at})"
