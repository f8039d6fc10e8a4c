from enum import Enum


class PipelineStage(str, Enum):
    awaiting_upload = "awaiting-upload"
    transforming_base = "transforming-base"
    styling = "styling"
    restyling = "restyling"  # styling with a restyle call outstanding
