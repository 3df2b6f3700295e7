from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UUID
from sqlalchemy.orm import relationship

from easyaccess.db.base import BaseModel


class File(BaseModel):
    __tablename__ = "files"

    name = Column(String(255), unique=True, index=True, nullable=False)
    password_digest = Column(String(255), nullable=False)
    content_text = Column(Text, nullable=False, default="")
    updated_at = Column(DateTime, nullable=False)

    # Relationships
    images = relationship(
        "FileImage",
        back_populates="file",
        order_by="FileImage.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class FileImage(BaseModel):
    __tablename__ = "file_images"

    file_id = Column(UUID(as_uuid=True), ForeignKey("files.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    # data URI вида data:image/png;base64,...
    image_data = Column(Text, nullable=False)

    # Relationships
    file = relationship("File", back_populates="images")
