from ppmcodec.repositories.image_repository import ImageRepository
from ppmcodec.repositories.ppm_repository import PPMRepository
