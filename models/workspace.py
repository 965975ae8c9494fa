"""
Workspace models for the in-browser code editor's file tree.
"""
from pydantic import Field
from typing import List, Optional
from enum import Enum

from models.generation import CamelModel, GeneratedCode


class NodeType(str, Enum):
    FILE = "file"
    FOLDER = "folder"


class FileNode(CamelModel):
    """A file or folder as returned to the editor; folders carry their children."""
    id: str
    name: str
    type: NodeType
    path: str
    language: Optional[str] = None
    content: Optional[str] = None
    children: Optional[List["FileNode"]] = None


FileNode.model_rebuild()


class WorkspaceResponse(CamelModel):
    id: str
    files: List[FileNode]


class FileCreateRequest(CamelModel):
    parent_path: str = Field(default="/", description="Folder to create the node in")
    type: NodeType = NodeType.FILE
    name: Optional[str] = Field(default=None, description="Defaults to new-file.txt or new-folder")


class FileContentUpdate(CamelModel):
    path: str
    content: str


class FileRenameRequest(CamelModel):
    path: str
    new_name: str


class LoadCodeRequest(CamelModel):
    code: GeneratedCode
