from photo_upload.main import run

run()
