from ppmcodec.services.image_service import ImageService
